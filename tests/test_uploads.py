"""Tests for upload-size checks and their translated responses."""

import io

import pytest
from fastapi import Depends, FastAPI, UploadFile
from httpx import ASGITransport, AsyncClient
from starlette.datastructures import Headers
from starlette.datastructures import UploadFile as StarletteUploadFile
from starlette.requests import Request

from restfaults import config
from restfaults.config import FaultSettings
from restfaults.faults import (
    FileSizeLimitExceededError,
    SizeLimitExceededError,
    UploadSizeExceededError,
)
from restfaults.handlers import install_error_handlers
from restfaults.translator import ErrorTranslator
from restfaults.uploads import (
    check_file_size,
    check_request_size,
    enforce_upload_limits,
    upload_limits_dependency,
)

_MB = 1024 * 1024


def make_request(headers: dict[str, str]) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/upload",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }
    return Request(scope)


def make_upload(size: int, filename: str = "data.bin", known_size: bool = True) -> StarletteUploadFile:
    return StarletteUploadFile(
        file=io.BytesIO(b"x" * size),
        size=size if known_size else None,
        filename=filename,
        headers=Headers({"content-type": "application/octet-stream"}),
    )


class TestCheckRequestSize:
    def test_within_limit(self):
        check_request_size(make_request({"Content-Length": "100"}), 100)

    def test_missing_content_length_is_ignored(self):
        check_request_size(make_request({}), 1)

    def test_over_limit_raises_with_request_cause(self):
        with pytest.raises(UploadSizeExceededError) as info:
            check_request_size(make_request({"Content-Length": "2048"}), 1024)

        cause = info.value.__cause__
        assert isinstance(cause, SizeLimitExceededError)
        assert cause.actual == 2048
        assert cause.permitted == 1024
        assert info.value.max_upload_size == 1024


class TestCheckFileSize:
    def test_within_limit(self):
        check_file_size(make_upload(10), 10)

    def test_over_limit_raises_with_file_cause(self):
        with pytest.raises(UploadSizeExceededError) as info:
            check_file_size(make_upload(11, "photo.png"), 10)

        cause = info.value.__cause__
        assert isinstance(cause, FileSizeLimitExceededError)
        assert cause.file_name == "photo.png"
        assert cause.actual == 11

    def test_unknown_size_is_measured(self):
        upload = make_upload(11, known_size=False)
        upload.file.seek(3)
        with pytest.raises(UploadSizeExceededError):
            check_file_size(upload, 10)
        assert upload.file.tell() == 3


def build_upload_app(translator_settings: FaultSettings, limit_settings: FaultSettings) -> FastAPI:
    app = FastAPI()
    install_error_handlers(app, ErrorTranslator.from_settings(translator_settings))

    @app.post("/files", dependencies=[Depends(upload_limits_dependency(limit_settings))])
    async def upload(file: UploadFile):
        return {"name": file.filename}

    return app


@pytest.fixture
def limited_settings():
    return FaultSettings(MAX_FILE_SIZE=1 * _MB, MAX_REQUEST_SIZE=4 * _MB)


@pytest.fixture
async def upload_client(limited_settings):
    app = build_upload_app(limited_settings, limited_settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class TestEnforceUploadLimits:
    async def test_small_file_accepted(self, upload_client):
        response = await upload_client.post("/files", files={"file": ("a.txt", b"hello")})
        assert response.status_code == 200
        assert response.json() == {"name": "a.txt"}

    async def test_file_over_limit(self, upload_client):
        payload = b"x" * (_MB + 1)
        response = await upload_client.post("/files", files={"file": ("big.bin", payload)})
        assert response.status_code == 413
        assert response.json() == {
            "message": "request too large",
            "details": "Max file size: 1 Mb",
        }
        assert response.headers["connection"] == "close"

    async def test_request_over_limit(self, upload_client):
        payload = b"x" * (5 * _MB)
        response = await upload_client.post("/files", files={"file": ("huge.bin", payload)})
        assert response.status_code == 413
        assert response.json() == {
            "message": "request too large",
            "details": "Max request size: 4 Mb",
        }


class TestReportedLimits:
    async def test_details_name_the_enforced_file_limit(self):
        # Translator configured with wider limits than the dependency enforces.
        app = build_upload_app(
            FaultSettings(MAX_FILE_SIZE=5 * _MB, MAX_REQUEST_SIZE=50 * _MB),
            FaultSettings(MAX_FILE_SIZE=1 * _MB, MAX_REQUEST_SIZE=4 * _MB),
        )
        payload = b"x" * (2 * _MB)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.post("/files", files={"file": ("big.bin", payload)})

        assert response.status_code == 413
        assert response.json()["details"] == "Max file size: 1 Mb"

    async def test_details_name_the_enforced_request_limit(self):
        app = build_upload_app(
            FaultSettings(MAX_FILE_SIZE=5 * _MB, MAX_REQUEST_SIZE=50 * _MB),
            FaultSettings(MAX_FILE_SIZE=8 * _MB, MAX_REQUEST_SIZE=3 * _MB),
        )
        payload = b"x" * (4 * _MB)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.post("/files", files={"file": ("big.bin", payload)})

        assert response.status_code == 413
        assert response.json()["details"] == "Max request size: 3 Mb"

    async def test_default_dependency_reads_module_settings(self, monkeypatch):
        monkeypatch.setattr(config.settings, "MAX_REQUEST_SIZE", 10)
        with pytest.raises(UploadSizeExceededError):
            await enforce_upload_limits(make_request({"Content-Length": "11"}))
