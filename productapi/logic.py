import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import BackgroundTasks
from starlette.datastructures import FormData, UploadFile

from .database import InMemoryStore, MongoStore
from .media import IMAGE, VIDEO, CloudinaryUploader, UploadedMedia
from .models import Product, ProductCreate
from .storage import TempStorage

# This file contains the logic behind the product endpoints.

logger = logging.getLogger(__name__)


class FormError(ValueError):
    """Raised for a multipart form the create endpoint cannot accept."""
    pass


def _text(form: FormData, name: str) -> Optional[str]:
    value = form.get(name)
    if value is None or isinstance(value, str):
        return value
    raise FormError(f"field {name!r} expects text, got a file")


def _single_file(form: FormData, name: str) -> Optional[UploadFile]:
    # text parts and empty file inputs (no filename) count as absent
    files = [v for v in form.getlist(name) if isinstance(v, UploadFile) and v.filename]
    if len(files) > 1:
        raise FormError(f"field {name!r} accepts one file, got {len(files)}")
    return files[0] if files else None


def parse_product_form(form: FormData) -> Dict[str, Any]:
    return {
        "title": _text(form, "title"),
        "description": _text(form, "description"),
        "thumbnail": _single_file(form, "thumbnail"),
        "video": _single_file(form, "video"),
    }


async def _discard(uploader: CloudinaryUploader, uploaded: List[UploadedMedia]) -> None:
    for media in uploaded:
        try:
            await uploader.destroy(media)
        except Exception:
            logger.exception("could not discard orphaned %s %s", media.resource_type, media.public_id)


async def create_product_logic(
    *,
    title: Optional[str],
    description: Optional[str],
    thumbnail: Optional[UploadFile],
    video: Optional[UploadFile],
    staging: TempStorage,
    uploader: CloudinaryUploader,
    store: Union[InMemoryStore, MongoStore],
    background_tasks: BackgroundTasks,
    discard_orphaned_media: bool = False,
) -> Product:
    """Stage, upload and persist one product.

    Staged files are queued for deletion as soon as they exist, so they are
    removed after the response whether or not the request succeeded.
    """
    uploaded: List[UploadedMedia] = []
    urls = {"thumbnail_url": None, "video_url": None}

    try:
        # thumbnail strictly before video
        for field, upload, resource_type in (
            ("thumbnail_url", thumbnail, IMAGE),
            ("video_url", video, VIDEO),
        ):
            if upload is None:
                continue
            path = await staging.write(upload.filename, upload.file)
            background_tasks.add_task(staging.delete, path)
            media = await uploader.upload(path, resource_type)
            uploaded.append(media)
            urls[field] = media.secure_url

        product = ProductCreate(title=title, description=description, **urls)
        return await store.insert(product)
    except Exception:
        if uploaded and discard_orphaned_media:
            await _discard(uploader, uploaded)
        elif uploaded:
            logger.warning(
                "create failed after upload; orphaned remote assets: %s",
                ", ".join(m.public_id for m in uploaded),
            )
        raise


async def list_products_logic(store: Union[InMemoryStore, MongoStore]) -> List[Product]:
    return await store.find_all()
