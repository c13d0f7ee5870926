# storefront/api/routers/health.py
from fastapi import APIRouter

from storefront.services.health_service import HealthService

router = APIRouter(prefix="/health", tags=["health"])


def get_service():
    return HealthService()


@router.get("")
def health():
    return get_service().status()


@router.get("/ping")
def ping():
    return get_service().ping_response()


@router.get("/ready")
def ready():
    return get_service().readiness()


@router.get("/live")
def live():
    return get_service().liveness()
