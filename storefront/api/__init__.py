# storefront/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.api.routers import (
    admins,
    brands,
    carts,
    coupons,
    customers,
    health,
    orders,
    payments,
    products,
    shipping,
)
from storefront.domain.errors import ConflictError, NotFoundError, ValidationFailed
from storefront.utils.settings import APP_VERSION
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    def _not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConflictError)
    def _conflict(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(ValidationFailed)
    def _validation_failed(request: Request, exc: ValidationFailed):
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RequestValidationError)
    def _bad_request(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def create_app() -> FastAPI:
    app = FastAPI(title="Storefront Service", version=APP_VERSION)

    app.include_router(health.router)
    app.include_router(admins.router)
    app.include_router(brands.router)
    app.include_router(products.router)
    app.include_router(customers.router)
    app.include_router(carts.router)
    app.include_router(coupons.router)
    app.include_router(orders.router)
    app.include_router(payments.router)
    app.include_router(shipping.router)

    register_exception_handlers(app)
    return app
