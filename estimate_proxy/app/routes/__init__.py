"""
FastAPI Routes.

API 라우트 (JSON): extract, config, estimate
"""

from . import config, estimate, extract

__all__ = ["config", "estimate", "extract"]
