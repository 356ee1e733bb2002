"""
API Routers Package
"""

from .analytics import router as analytics_router
from .recovery import router as recovery_router
from .calories import router as calories_router

__all__ = ['analytics_router', 'recovery_router', 'calories_router']
