"""
API v1 endpoints.

Route prefix constants for consistent API versioning.
"""

API_V1_PREFIX: str = ""

JOBS_PREFIX: str = f"{API_V1_PREFIX}/jobs"

__all__ = ["API_V1_PREFIX", "JOBS_PREFIX"]
