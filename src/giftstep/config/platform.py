"""Campaign platform API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import NO_RETRY, ResilienceConfig

PLATFORM_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class PlatformConfig:
    """Holds the campaign platform endpoint and credentials."""

    organization_id: str
    auth_token: str
    resilience: ResilienceConfig


def get_platform_config(*, resilience: ResilienceConfig | None = None) -> PlatformConfig:
    values = require_env_vars(
        ("GIFTSTEP_API_URL", "GIFTSTEP_AUTH_TOKEN", "GIFTSTEP_ORGANIZATION_ID")
    )
    base_url = values["GIFTSTEP_API_URL"].rstrip("/")
    # retrying a failed call is the user's decision, the client never does it on its own
    return PlatformConfig(
        organization_id=values["GIFTSTEP_ORGANIZATION_ID"],
        auth_token=values["GIFTSTEP_AUTH_TOKEN"],
        resilience=resilience
        or ResilienceConfig(
            name="platform",
            base_url=base_url,
            timeout_seconds=PLATFORM_TIMEOUT_SECONDS,
            retry=NO_RETRY,
            cache=None,
            default_headers={"Authorization": f"Bearer {values['GIFTSTEP_AUTH_TOKEN']}"},
        ),
    )
