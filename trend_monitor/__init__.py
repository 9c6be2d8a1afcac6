"""
Trend Monitor.

Searches news, social and Finnish regional sources for a keyword, scores
the results with heuristic text analyzers and stores them for trend
dashboards.
"""

__version__ = "1.0.0"
