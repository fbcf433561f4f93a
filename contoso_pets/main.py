# contoso_pets/main.py
import logging
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .core import ProductHandler
from .database import InMemoryProductStore, ProductStore, seed_products
from .errors import errors_by_field
from .logging_config import setup_logging
from .models import Product, ProductIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def get_handler(request: Request) -> ProductHandler:
    return request.app.state.handler


def _problem(errors) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        media_type="application/problem+json",
        content={
            "type": "https://tools.ietf.org/html/rfc9110#section-15.5.1",
            "title": "One or more validation errors occurred.",
            "status": 400,
            "errors": errors,
        },
    )


# ---------------------------
# Product endpoints
# ---------------------------
@router.get("", response_model=List[Product])
async def list_products(handler: ProductHandler = Depends(get_handler)):
    return await handler.list_products()


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: int, handler: ProductHandler = Depends(get_handler)):
    return await handler.get_product(product_id)


@router.post("", status_code=201, response_model=Product)
async def create_product(
    payload: ProductIn,
    request: Request,
    response: Response,
    handler: ProductHandler = Depends(get_handler),
):
    p = await handler.create_product(payload)
    response.headers["Location"] = str(request.url_for("get_product", product_id=p.id))
    return p


@router.put("/{product_id}", status_code=204)
async def update_product(product_id: int, payload: Product, handler: ProductHandler = Depends(get_handler)):
    await handler.update_product(product_id, payload)
    return Response(status_code=204)


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: int, handler: ProductHandler = Depends(get_handler)):
    await handler.delete_product(product_id)
    return Response(status_code=204)


# ---------------------------
# App factory
# ---------------------------
def create_app(settings: Optional[Settings] = None, store: Optional[ProductStore] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_file or None)

    if store is None:
        store = InMemoryProductStore()
    # seed before the app can accept any request
    if settings.seed_data:
        seed_products(store)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.settings = settings
    app.state.handler = ProductHandler(store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method, request.url.path, response.status_code, (time.time() - start) * 1000,
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return _problem(errors_by_field(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return Response(status_code=404)
        if exc.status_code == 400 and isinstance(exc.detail, dict) and "errors" in exc.detail:
            return _problem(exc.detail["errors"])
        return await http_exception_handler(request, exc)

    @app.get("/health", response_class=PlainTextResponse)
    async def health():
        return "ok"

    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
