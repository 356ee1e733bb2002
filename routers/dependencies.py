"""
Shared router dependencies
"""

from fastapi import Depends, HTTPException, Request

from services import ServiceRegistry, WorkoutAnalyticsService


def get_registry(request: Request) -> ServiceRegistry:
    """The per-app ServiceRegistry created at startup"""
    return request.app.state.registry


def get_service(user_id: str, registry: ServiceRegistry = Depends(get_registry)) -> WorkoutAnalyticsService:
    """A user's service, created on first use. Only initialize should depend on this."""
    return registry.get(user_id)


def get_initialized_service(user_id: str,
                            registry: ServiceRegistry = Depends(get_registry)) -> WorkoutAnalyticsService:
    """A user's service, or 409 when their history has not been loaded"""
    service = registry.find(user_id)
    if service is None or not service.initialized:
        raise HTTPException(
            status_code=409,
            detail=f"Analytics not initialized for user {user_id}. POST /analytics/{user_id}/initialize first."
        )
    return service
