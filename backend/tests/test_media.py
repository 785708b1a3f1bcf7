import pytest

from chatline.application.commands.media import UploadMediaCommand, UploadMediaHandler
from chatline.domain.exceptions import (
    DomainValidationError,
    EntityNotFoundError,
    PayloadTooLargeError,
)
from chatline.domain.value_objects import MediaRef, UserId
from chatline.infrastructure.storage import DiskBlobStore


def test_store_and_resolve(tmp_path):
    store = DiskBlobStore(str(tmp_path / "media"))
    ref = store.store(b"\x89PNG", "image/png")

    assert ref.extension == ".png"
    assert store.resolve(ref).read_bytes() == b"\x89PNG"


def test_jpeg_extension(tmp_path):
    ref = DiskBlobStore(str(tmp_path)).store(b"jpg", "image/jpeg")
    assert ref.value.endswith(".jpg")


def test_resolve_missing(tmp_path):
    store = DiskBlobStore(str(tmp_path))
    with pytest.raises(EntityNotFoundError):
        store.resolve(MediaRef("missing.png"))


@pytest.mark.asyncio
async def test_upload_accepts_images_and_videos(tmp_path):
    handler = UploadMediaHandler(DiskBlobStore(str(tmp_path)), ("image/", "video/"))
    ref = await handler.execute(UploadMediaCommand(UserId(3), b"data", "video/mp4"))
    assert ref.extension == ".mp4"


@pytest.mark.asyncio
@pytest.mark.parametrize("content, mime", [(b"text", "text/plain"), (b"", "image/png")])
async def test_upload_rejects(tmp_path, content, mime):
    handler = UploadMediaHandler(DiskBlobStore(str(tmp_path)), ("image/", "video/"))
    with pytest.raises(DomainValidationError):
        await handler.execute(UploadMediaCommand(UserId(3), content, mime))
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_upload_over_the_limit_is_refused(tmp_path):
    handler = UploadMediaHandler(DiskBlobStore(str(tmp_path)), ("image/",), max_bytes=4)
    with pytest.raises(PayloadTooLargeError):
        await handler.execute(UploadMediaCommand(UserId(3), b"12345", "image/png"))
    assert list(tmp_path.iterdir()) == []
