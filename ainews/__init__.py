"""
AI News Aggregator Backend

A FastAPI backend that aggregates AI news from RSS feeds and ArXiv,
classifies articles with an LLM, and serves them through a query API.
"""

__version__ = "1.0.0"
