"""FaultSettings -- restfaults configuration.

All values are read from environment variables (prefix RESTFAULTS_) via
pydantic-settings, once, when this module is imported.
"""

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_BYTES_PER_MEGABYTE = 1024 * 1024


class FaultSettings(BaseSettings):
    """restfaults settings, loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="RESTFAULTS_", env_file=".env", extra="ignore")

    # Upload limits, in bytes
    MAX_FILE_SIZE: int = Field(default=1 * _BYTES_PER_MEGABYTE, ge=0)
    MAX_REQUEST_SIZE: int = Field(default=10 * _BYTES_PER_MEGABYTE, ge=0)

    # Message catalogue: "en" or "ru"
    LOCALE: str = "en"


def to_megabytes(byte_count: int) -> int:
    """Whole megabytes in ``byte_count``, rounded down."""
    return byte_count // _BYTES_PER_MEGABYTE


@dataclass(frozen=True)
class UploadLimits:
    """Upload limits in whole megabytes, as reported in error details."""

    max_file_size_mb: int
    max_request_size_mb: int

    @classmethod
    def from_bytes(cls, max_file_size: int, max_request_size: int) -> "UploadLimits":
        return cls(
            max_file_size_mb=to_megabytes(max_file_size),
            max_request_size_mb=to_megabytes(max_request_size),
        )

    @classmethod
    def from_settings(cls, app_settings: FaultSettings) -> "UploadLimits":
        return cls.from_bytes(app_settings.MAX_FILE_SIZE, app_settings.MAX_REQUEST_SIZE)


settings = FaultSettings()
