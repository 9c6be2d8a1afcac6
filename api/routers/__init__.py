"""
API routers for the Trend Monitor.

This package contains all FastAPI router modules for different API endpoints.
"""

__all__ = ["health", "metrics", "search", "trends"]
