"""
HTTP API for the Trend Monitor.
"""

__version__ = "1.0.0"
