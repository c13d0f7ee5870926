# storefront/services/health_service.py
import time
from datetime import datetime, timezone

from storefront.data.database import ping_db
from storefront.utils.settings import APP_ENV, APP_VERSION

_started = time.monotonic()


def _uptime() -> int:
    return int(time.monotonic() - _started)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class HealthService:
    def __init__(self, ping=ping_db):
        self.ping = ping

    def check_database(self) -> dict:
        started = time.perf_counter()
        connected = self.ping()
        return {
            "connected": connected,
            "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
        }

    def status(self) -> dict:
        db = self.check_database()
        return {
            "status": "ok",
            "timestamp": _now_iso(),
            "uptime": _uptime(),
            "version": APP_VERSION,
            "environment": APP_ENV,
            "database": {
                "status": "connected" if db["connected"] else "disconnected",
                "response_time_ms": db["response_time_ms"],
            },
        }

    def ping_response(self) -> dict:
        return {"message": "pong", "timestamp": _now_iso()}

    def readiness(self) -> dict:
        checks = {"database": "ok" if self.check_database()["connected"] else "error"}
        ready = all(v == "ok" for v in checks.values())
        return {"status": "ready" if ready else "not ready", "checks": checks}

    def liveness(self) -> dict:
        return {"status": "alive", "uptime": _uptime()}
