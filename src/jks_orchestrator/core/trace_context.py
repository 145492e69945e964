"""Trace id context variable for logging"""

import contextvars

# One trace id per job (or per HTTP request when submitted through the API)
trace_id_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "trace_id", default=None
)
