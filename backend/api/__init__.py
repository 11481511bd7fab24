"""
4B API Module

FastAPI routes for session scoring.
"""

from .routes import router

__all__ = [
    "router",
]
