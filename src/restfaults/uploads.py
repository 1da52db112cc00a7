"""Upload-size checks.

Each check raises UploadSizeExceededError chained from the specific limit
cause, so the response names the limit that was hit.

Usage:
    @router.post("/files", dependencies=[Depends(upload_limits_dependency(app_settings))])
    async def upload(file: UploadFile):
        ...
"""

import os
from collections.abc import Callable, Coroutine
from typing import Any

from starlette.datastructures import UploadFile
from starlette.requests import Request

from restfaults.config import FaultSettings, settings
from restfaults.faults import (
    FileSizeLimitExceededError,
    SizeLimitExceededError,
    UploadSizeExceededError,
)


def check_request_size(request: Request, max_request_size: int) -> None:
    content_length = request.headers.get("content-length", "")
    if not content_length.isdigit():
        return
    actual = int(content_length)
    if actual > max_request_size:
        raise UploadSizeExceededError(max_request_size) from SizeLimitExceededError(
            actual, max_request_size
        )


def _upload_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    position = upload.file.tell()
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(position)
    return size


def check_file_size(upload: UploadFile, max_file_size: int) -> None:
    actual = _upload_size(upload)
    if actual > max_file_size:
        raise UploadSizeExceededError(max_file_size) from FileSizeLimitExceededError(
            actual, max_file_size, upload.filename
        )


def upload_limits_dependency(
    app_settings: FaultSettings | None = None,
) -> Callable[[Request], Coroutine[Any, Any, None]]:
    """Build a FastAPI dependency applying the request and file limits of ``app_settings``.

    Pass the same settings the translator was built from; the 413 details
    always report the limit the failed check enforced.
    """
    app_settings = app_settings or settings

    async def enforce(request: Request) -> None:
        check_request_size(request, app_settings.MAX_REQUEST_SIZE)
        if not request.headers.get("content-type", "").startswith("multipart/form-data"):
            return
        form = await request.form()
        for _, value in form.multi_items():
            if isinstance(value, UploadFile):
                check_file_size(value, app_settings.MAX_FILE_SIZE)

    return enforce


enforce_upload_limits = upload_limits_dependency()
