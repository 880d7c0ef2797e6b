"""People Data Labs enrichment configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    ShouldCacheHook,
)

PDL_BASE_URL = "https://api.peopledatalabs.com/v5"
PDL_TIMEOUT_SECONDS = 20.0
DEFAULT_MIN_LIKELIHOOD = 2
DEFAULT_ENRICHMENT_DELAY_SECONDS = 1.0


@dataclass(frozen=True, slots=True)
class EnrichmentConfig:
    api_key: str
    resilience: ResilienceConfig
    min_likelihood: int = DEFAULT_MIN_LIKELIHOOD
    delay_seconds: float = DEFAULT_ENRICHMENT_DELAY_SECONDS


def _cache_matches_only(payload: object) -> bool:
    return isinstance(payload, dict) and payload.get("status") == 200  # noqa: PLR2004


def get_enrichment_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> EnrichmentConfig:
    values = require_env_vars(("PDL_API_KEY",))
    api_key = values["PDL_API_KEY"]
    return EnrichmentConfig(
        api_key=api_key,
        resilience=resilience
        or ResilienceConfig(
            name="peopledatalabs",
            base_url=PDL_BASE_URL,
            timeout_seconds=PDL_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
            retry=RetryPolicy(
                total=2,
                allowed_methods=frozenset({"GET"}),
                status_forcelist=frozenset({429, 502, 503, 504}),
            ),
            cache=CacheConfig(
                backend="memory",
                should_cache=cache_predicate or _cache_matches_only,
            ),
            default_headers={"X-API-Key": api_key, "Accept": "application/json"},
        ),
    )
