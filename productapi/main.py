# productapi/main.py
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, load_settings
from .database import InMemoryStore, MongoStore
from .logger import setup_logging
from .logic import create_product_logic, list_products_logic, parse_product_form
from .media import CloudinaryUploader
from .models import ErrorOut, Product
from .storage import TempStorage

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------
# Dependencies
# ---------------------------
def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_store(request: Request):
    return request.app.state.store

def get_uploader(request: Request) -> CloudinaryUploader:
    return request.app.state.uploader

def get_staging(request: Request) -> TempStorage:
    return request.app.state.staging


# ---------------------------
# Product endpoints
# ---------------------------
PRODUCT_FORM = {
    "requestBody": {
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string"},
                        "description": {"type": "string"},
                        "thumbnail": {"type": "string", "format": "binary"},
                        "video": {"type": "string", "format": "binary"},
                    },
                }
            }
        }
    }
}


@router.post(
    "/products",
    status_code=201,
    response_model=Product,
    responses={500: {"model": ErrorOut}},
    openapi_extra=PRODUCT_FORM,
)
async def create_product(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
    store=Depends(get_store),
    uploader: CloudinaryUploader = Depends(get_uploader),
    staging: TempStorage = Depends(get_staging),
):
    try:
        fields = parse_product_form(await request.form())
        return await create_product_logic(
            **fields,
            staging=staging,
            uploader=uploader,
            store=store,
            background_tasks=background_tasks,
            discard_orphaned_media=settings.discard_orphaned_media,
        )
    except Exception:
        logger.exception("Error creating product")
        return JSONResponse(status_code=500, content={"error": "Error creating product"})


@router.get(
    "/products",
    response_model=List[Product],
    responses={500: {"model": ErrorOut}},
)
async def list_products(store=Depends(get_store)):
    try:
        return await list_products_logic(store)
    except Exception:
        logger.exception("Error fetching products")
        return JSONResponse(status_code=500, content={"error": "Error fetching products"})


# ---------------------------
# App factory
# ---------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    await app.state.store.connect()
    try:
        yield
    finally:
        await app.state.store.close()


async def validation_error(request: Request, exc: RequestValidationError):
    if not request.url.path.startswith("/products"):
        return await request_validation_exception_handler(request, exc)
    logger.warning("rejected %s %s: %s", request.method, request.url.path, exc.errors())
    message = "Error creating product" if request.method == "POST" else "Error fetching products"
    return JSONResponse(status_code=500, content={"error": message})


def create_app(
    settings: Optional[Settings] = None,
    store=None,
    uploader: Optional[CloudinaryUploader] = None,
    staging: Optional[TempStorage] = None,
) -> FastAPI:
    """Build the app; any component not passed in is created from ``settings``."""
    if settings is None:
        settings = load_settings()
    setup_logging(settings.log_level)

    if store is None:
        if settings.mongodb_uri:
            store = MongoStore(settings.mongodb_uri, settings.mongodb_database)
        else:
            logger.warning("MONGODB_URI is not set; products are kept in memory")
            store = InMemoryStore()

    app = FastAPI(title="product media api", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.store = store
    app.state.uploader = uploader or CloudinaryUploader(settings.cloudinary)
    app.state.staging = staging or TempStorage(settings.upload_dir)

    app.add_exception_handler(RequestValidationError, validation_error)
    app.include_router(router)
    return app


def run() -> None:
    # also servable with: uvicorn productapi.main:create_app --factory
    app = create_app()
    settings = app.state.settings
    logger.info("server is running on %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
