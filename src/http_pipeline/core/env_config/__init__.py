"""
Environment configuration for HTTP Pipeline.

Example:
    >>> from http_pipeline.core.env_config import load_from_env
    >>>
    >>> client = RestClient.create(load_from_env())
    >>> client = RestClient.create(load_from_env(env_file=".env.staging", read_timeout=30))
"""

from .loader import load_settings, load_from_env, load_logging_from_env, load_async_workers
from .validator import PipelineSettings

__all__ = [
    "load_settings",
    "load_from_env",
    "load_logging_from_env",
    "load_async_workers",
    "PipelineSettings",
]
