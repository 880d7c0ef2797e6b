"""Application configuration helpers."""

from __future__ import annotations

from .enrichment import EnrichmentConfig, get_enrichment_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .platform import PlatformConfig, get_platform_config
from .step import StepConfig, get_step_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "NO_RETRY",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "EnrichmentConfig",
    "MissingConfigurationError",
    "PlatformConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StepConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_enrichment_config",
    "get_platform_config",
    "get_step_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
