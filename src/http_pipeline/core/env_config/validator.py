"""
Pydantic settings for environment configuration.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """
    HTTP Pipeline configuration from environment variables.

    Reads from:
    1. Explicit keyword arguments
    2. Environment variables (HTTP_PIPELINE_*)
    3. .env file
    4. Defaults

    Request fields default to None, meaning "not set": they do not override
    anything when the resulting RequestConfig layer is merged.

    Example .env file:
        HTTP_PIPELINE_BASE_URL=https://api.example.com/
        HTTP_PIPELINE_CONNECT_TIMEOUT=3
        HTTP_PIPELINE_READ_TIMEOUT=15
        HTTP_PIPELINE_PROXY=http://proxy.local:3128
        HTTP_PIPELINE_ASYNC_WORKERS=8
        HTTP_PIPELINE_LOG_LEVEL=DEBUG
        HTTP_PIPELINE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTP_PIPELINE_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Request layer
    base_url: Optional[str] = Field(default=None, description="Base URL for all requests")
    connect_timeout: Optional[float] = Field(default=None, gt=0, description="Connect timeout in seconds")
    read_timeout: Optional[float] = Field(default=None, gt=0, description="Read timeout in seconds")
    use_caches: Optional[bool] = Field(default=None)
    proxy: Optional[str] = Field(default=None, description="Proxy URL, e.g. http://host:3128")
    user_agent: Optional[str] = Field(default=None)
    accept: Optional[str] = Field(default=None)

    # Async executor
    async_workers: int = Field(default=5, ge=1, le=256)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = Field(default=True)

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_format(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    @field_validator('proxy')
    @classmethod
    def validate_proxy(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and "://" not in v:
            raise ValueError("proxy must be a URL with scheme, e.g. http://host:3128")
        return v

    @model_validator(mode="after")
    def validate_file_path(self) -> "PipelineSettings":
        """log_file_path is required when log_enable_file=True."""
        if self.log_enable_file and not self.log_file_path:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return self

    def request_fields(self) -> Dict[str, Any]:
        """Request fields that were actually provided."""
        names = ('base_url', 'connect_timeout', 'read_timeout', 'use_caches', 'proxy')
        return {name: getattr(self, name) for name in names if getattr(self, name) is not None}

    def header_fields(self) -> Dict[str, str]:
        headers = {}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        if self.accept:
            headers["Accept"] = self.accept
        return headers
