# tests/test_products_api.py
import logging

from conftest import FailingStore, FakeUploader, make_client

PNG = b"\x89PNG\r\n\x1a\nfake-image"
MP4 = b"\x00\x00\x00\x18ftypmp42fake-video"


def _create(client, files=None, **form):
    return client.post("/products", data=form, files=files)


def test_list_empty_store_returns_empty_array(client):
    r = client.get("/products")
    assert r.status_code == 200
    assert r.json() == []


def test_create_with_both_files_then_list(client, uploader):
    r = _create(
        client,
        files={"thumbnail": ("img.png", PNG, "image/png"), "video": ("clip.mp4", MP4, "video/mp4")},
        title="Demo",
        description="A demo",
    )
    assert r.status_code == 201
    body = r.json()
    assert set(body) == {"id", "title", "description", "thumbnailUrl", "videoUrl"}
    assert body["id"]
    assert body["title"] == "Demo"
    assert body["description"] == "A demo"
    assert body["thumbnailUrl"].startswith("https://")
    assert body["videoUrl"].startswith("https://")

    listed = client.get("/products").json()
    assert body in listed


def test_thumbnail_uploaded_before_video_with_resource_types(client, uploader):
    _create(
        client,
        files={"thumbnail": ("img.png", PNG, "image/png"), "video": ("clip.mp4", MP4, "video/mp4")},
    )
    assert [u["resource_type"] for u in uploader.uploads] == ["image", "video"]
    assert uploader.uploads[0]["content"] == PNG
    assert uploader.uploads[1]["content"] == MP4
    assert all(u["existed"] for u in uploader.uploads)


def test_create_without_files_stores_text_only(client, uploader):
    r = _create(client, title="Plain", description="No media")
    assert r.status_code == 201
    body = r.json()
    assert body["title"] == "Plain"
    assert body["description"] == "No media"
    assert body["thumbnailUrl"] is None
    assert body["videoUrl"] is None
    assert uploader.uploads == []


def test_create_with_no_fields_is_accepted(client):
    r = client.post("/products")
    assert r.status_code == 201
    assert r.json()["title"] is None
    assert len(client.get("/products").json()) == 1


def test_create_with_only_video(client, uploader):
    r = _create(client, files={"video": ("clip.mp4", MP4, "video/mp4")}, title="Clip")
    assert r.status_code == 201
    assert r.json()["thumbnailUrl"] is None
    assert r.json()["videoUrl"].startswith("https://res.example.com/video/")


def test_staged_files_removed_after_create(client, uploader, upload_dir):
    r = _create(
        client,
        files={"thumbnail": ("img.png", PNG, "image/png"), "video": ("clip.mp4", MP4, "video/mp4")},
    )
    assert r.status_code == 201
    for u in uploader.uploads:
        assert not u["path"].exists()
    assert list(upload_dir.iterdir()) == []


def test_staged_name_is_unique_per_request(client, uploader):
    for _ in range(2):
        _create(client, files={"thumbnail": ("img.png", PNG, "image/png")})
    first, second = (u["path"].name for u in uploader.uploads)
    assert first != second
    assert first.endswith("-img.png")


def test_title_length_boundary(client):
    assert _create(client, title="t" * 50).status_code == 201

    r = _create(client, title="t" * 51)
    assert r.status_code == 500
    assert r.json() == {"error": "Error creating product"}
    assert [p["title"] for p in client.get("/products").json()] == ["t" * 50]


def test_description_length_boundary(client):
    assert _create(client, description="d" * 200).status_code == 201

    r = _create(client, description="d" * 201)
    assert r.status_code == 500
    assert len(client.get("/products").json()) == 1


def test_thumbnail_upload_failure_creates_nothing(upload_dir, store):
    uploader = FakeUploader(fail_on="image")
    client = make_client(upload_dir, store, uploader)

    r = _create(
        client,
        files={"thumbnail": ("img.png", PNG, "image/png"), "video": ("clip.mp4", MP4, "video/mp4")},
        title="Broken",
    )
    assert r.status_code == 500
    assert r.json() == {"error": "Error creating product"}
    # the video is never attempted once the thumbnail fails
    assert [u["resource_type"] for u in uploader.uploads] == ["image"]
    assert client.get("/products").json() == []
    assert list(upload_dir.iterdir()) == []


def test_store_failure_leaves_uploads_orphaned_by_default(upload_dir, uploader):
    client = make_client(upload_dir, FailingStore(), uploader)
    r = _create(client, files={"thumbnail": ("img.png", PNG, "image/png")})
    assert r.status_code == 500
    assert len(uploader.uploads) == 1
    assert uploader.destroyed == []


def test_store_failure_discards_uploads_when_enabled(upload_dir, uploader):
    client = make_client(upload_dir, FailingStore(), uploader, discard_orphaned_media=True)
    r = _create(
        client,
        files={"thumbnail": ("img.png", PNG, "image/png"), "video": ("clip.mp4", MP4, "video/mp4")},
    )
    assert r.status_code == 500
    assert [m.resource_type for m in uploader.destroyed] == ["image", "video"]


def test_list_store_failure(upload_dir, uploader):
    client = make_client(upload_dir, FailingStore(), uploader)
    r = client.get("/products")
    assert r.status_code == 500
    assert r.json() == {"error": "Error fetching products"}


def test_cors_allows_any_origin(client):
    r = client.get("/products", headers={"Origin": "http://elsewhere.example"})
    assert r.headers["access-control-allow-origin"] == "*"


def test_text_value_in_file_field_counts_as_absent(client, uploader):
    r = _create(client, title="x", thumbnail="not-a-file")
    assert r.status_code == 201
    assert r.json()["title"] == "x"
    assert r.json()["thumbnailUrl"] is None
    assert uploader.uploads == []


def test_empty_file_input_counts_as_absent(client, uploader):
    r = _create(client, files={"thumbnail": ("", b"", "application/octet-stream")}, title="x")
    assert r.status_code == 201
    assert r.json()["thumbnailUrl"] is None
    assert uploader.uploads == []


def test_second_file_in_one_field_is_rejected(client, uploader):
    r = _create(
        client,
        files=[
            ("thumbnail", ("a.png", PNG, "image/png")),
            ("thumbnail", ("b.png", PNG, "image/png")),
        ],
        title="Two thumbs",
    )
    assert r.status_code == 500
    assert r.json() == {"error": "Error creating product"}
    assert uploader.uploads == []
    assert client.get("/products").json() == []


def test_file_in_text_field_is_rejected(client):
    r = _create(client, files={"title": ("title.txt", b"Demo", "text/plain")})
    assert r.status_code == 500
    assert r.json() == {"error": "Error creating product"}


def test_empty_text_fields_are_stored_as_supplied(client):
    r = _create(client, files={"video": ("clip.mp4", MP4, "video/mp4")}, title="", description="")
    assert r.status_code == 201
    body = r.json()
    assert body["title"] == ""
    assert body["description"] == ""
    assert client.get("/products").json() == [body]


def test_length_caps_count_utf16_units(client):
    # each emoji is two UTF-16 units
    assert _create(client, title="\U0001F600" * 25).status_code == 201
    assert _create(client, title="\U0001F600" * 26).status_code == 500
    assert _create(client, title="é" * 50).status_code == 201


def test_video_upload_failure_after_thumbnail_creates_nothing(upload_dir, store, caplog):
    uploader = FakeUploader(fail_on="video")
    client = make_client(upload_dir, store, uploader)

    with caplog.at_level(logging.WARNING, logger="productapi.logic"):
        r = _create(
            client,
            files={"thumbnail": ("img.png", PNG, "image/png"), "video": ("clip.mp4", MP4, "video/mp4")},
            title="Half",
        )
    assert r.status_code == 500
    assert r.json() == {"error": "Error creating product"}
    assert [u["resource_type"] for u in uploader.uploads] == ["image", "video"]
    assert client.get("/products").json() == []
    assert list(upload_dir.iterdir()) == []
    assert "orphaned remote assets" in caplog.text
    assert uploader.destroyed == []


def test_discard_failure_is_logged_and_request_still_500(upload_dir, caplog):
    uploader = FakeUploader(fail_destroy=True)
    client = make_client(upload_dir, FailingStore(), uploader, discard_orphaned_media=True)

    r = _create(
        client,
        files={"thumbnail": ("img.png", PNG, "image/png"), "video": ("clip.mp4", MP4, "video/mp4")},
    )
    assert r.status_code == 500
    assert r.json() == {"error": "Error creating product"}
    # both assets are attempted even though the first delete fails
    assert [m.resource_type for m in uploader.destroyed] == ["image", "video"]
    assert caplog.text.count("could not discard orphaned") == 2


def test_validation_errors_under_products_map_to_500(client):
    app = client.app

    @app.get("/products/page/{number}")
    async def page(number: int):
        return []

    @app.get("/other/{number}")
    async def other(number: int):
        return []

    r = client.get("/products/page/first")
    assert r.status_code == 500
    assert r.json() == {"error": "Error fetching products"}

    r = client.get("/other/first")
    assert r.status_code == 422
    assert "detail" in r.json()
