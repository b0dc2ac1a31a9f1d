"""
Swing Phase Analyzer API Module

FastAPI routes for golf swing analysis.
"""

from .routes import router

__all__ = [
    "router",
]
