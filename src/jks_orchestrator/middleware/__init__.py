"""
Middleware to add trace_id to each request.

The trace_id allows tracking logs from the same HTTP request throughout
the job it submits, including the remote commands it runs.
"""

import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from jks_orchestrator.core.logging import logger
from jks_orchestrator.core.trace_context import trace_id_context

TRACE_ID_HEADER = "X-Trace-ID"


class TraceIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a trace_id to each request.

    A trace id sent by the caller in ``X-Trace-ID`` is reused, otherwise a
    UUID is generated. The response always carries the header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = request.headers.get(TRACE_ID_HEADER) or str(uuid.uuid4())

        trace_id_context.set(trace_id)

        logger.info(f"Request started: {request.method} {request.url.path}")

        try:
            response = await call_next(request)

            response.headers[TRACE_ID_HEADER] = trace_id

            logger.info(
                f"Request completed: {request.method} {request.url.path} - Status: {response.status_code}",  # noqa: E501
            )

            return response

        except Exception:
            logger.exception(f"Request failed: {request.method} {request.url.path}")
            raise

        finally:
            # Avoid leaking the trace_id into the next request
            trace_id_context.set(None)


__all__ = ["TraceIDMiddleware", "TRACE_ID_HEADER"]
