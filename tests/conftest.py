# tests/conftest.py
import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from productapi.config import Settings
from productapi.database import InMemoryStore
from productapi.main import create_app
from productapi.media import MediaUploadError, UploadedMedia
from productapi.storage import TempStorage


class FakeUploader:
    """Stands in for CloudinaryUploader; records every call."""

    def __init__(self, fail_on=None, fail_destroy=False):
        self.fail_on = fail_on
        self.fail_destroy = fail_destroy
        self.uploads = []
        self.destroyed = []

    async def upload(self, path, resource_type="image"):
        self.uploads.append({
            "path": Path(path),
            "resource_type": resource_type,
            "existed": os.path.exists(path),
            "content": Path(path).read_bytes(),
        })
        if resource_type == self.fail_on:
            raise MediaUploadError(f"provider refused {path}")
        name = os.path.basename(str(path))
        return UploadedMedia(
            secure_url=f"https://res.example.com/{resource_type}/upload/{name}",
            public_id=name,
            resource_type=resource_type,
        )

    async def destroy(self, media):
        self.destroyed.append(media)
        if self.fail_destroy:
            raise MediaUploadError(f"provider kept {media.public_id}")


class FailingStore(InMemoryStore):
    async def insert(self, product):
        raise ConnectionError("database unreachable")

    async def find_all(self):
        raise ConnectionError("database unreachable")


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def uploader():
    return FakeUploader()


def make_client(upload_dir, store, uploader, **settings):
    app = create_app(
        settings=Settings(upload_dir=str(upload_dir), **settings),
        store=store,
        uploader=uploader,
        staging=TempStorage(upload_dir),
    )
    return TestClient(app)


@pytest.fixture
def client(upload_dir, store, uploader):
    return make_client(upload_dir, store, uploader)
