"""
Health check and component listing endpoints
"""

from datetime import datetime
from typing import Any, Dict, List

from fastapi import APIRouter, Request

from virtualcomponents.core.component_base import ComponentInfo

router = APIRouter()


@router.get("/")
async def health_check(request: Request) -> Dict[str, str]:
    """Basic health check."""
    application = request.app.state.application
    return {
        "status": "healthy",
        "application": application.__name__,
        "namespace": application.app_namespace(),
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("/components", response_model=List[ComponentInfo])
async def list_components(request: Request) -> Any:
    """Registered components, including virtual ones."""
    return request.app.state.application.registry().describe()
