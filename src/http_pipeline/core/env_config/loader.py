"""
Configuration loader from environment variables and .env files.
"""

from typing import Any, Optional

from ..config import RequestConfig
from ..headers import Headers
from ..logging.config import LoggingConfig
from .validator import PipelineSettings


def load_settings(env_file: Optional[str] = None, **overrides: Any) -> PipelineSettings:
    """
    Read PipelineSettings.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (HTTP_PIPELINE_*)
    3. .env file (env_file or ./.env)
    4. Defaults

    Raises:
        pydantic.ValidationError: Invalid value in environment or overrides
    """
    if env_file is None:
        return PipelineSettings(**overrides)
    return PipelineSettings(_env_file=env_file, **overrides)


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> RequestConfig:
    """
    Build a RequestConfig layer from environment variables.

    Only provided values become set in the layer, so it can be merged
    on top of DEFAULT_CONFIG or any other layer without erasing fields.

    Example:
        >>> client = RestClient.create(load_from_env())

        >>> config = load_from_env(env_file=".env.production", read_timeout=30)
    """
    settings = load_settings(env_file, **overrides)

    fields = settings.request_fields()
    headers = settings.header_fields()
    if headers:
        fields['headers'] = Headers(headers)

    return RequestConfig(**fields)


def load_logging_from_env(env_file: Optional[str] = None, **overrides: Any) -> Optional[LoggingConfig]:
    """
    Build LoggingConfig from HTTP_PIPELINE_LOG_* variables.

    Returns:
        LoggingConfig, or None when both console and file output are disabled
    """
    settings = load_settings(env_file, **overrides)
    if not settings.log_enable_console and not settings.log_enable_file:
        return None

    return LoggingConfig.create(
        level=settings.log_level,
        format=settings.log_format,
        enable_console=settings.log_enable_console,
        enable_file=settings.log_enable_file,
        file_path=settings.log_file_path,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        enable_correlation_id=settings.log_enable_correlation_id,
    )


def load_async_workers(env_file: Optional[str] = None, **overrides: Any) -> int:
    """Size of the default async worker pool (HTTP_PIPELINE_ASYNC_WORKERS)."""
    return load_settings(env_file, **overrides).async_workers
