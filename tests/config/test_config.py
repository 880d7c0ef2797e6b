from __future__ import annotations

from decimal import Decimal
from pathlib import Path  # noqa: TC003

import pytest

from giftstep.config import (
    NO_RETRY,
    ConfigurationError,
    MissingConfigurationError,
    get_database_config,
    get_enrichment_config,
    get_platform_config,
    get_step_config,
    get_storage_config,
    require_env_var,
    require_env_vars,
)
from giftstep.config.storage import DEFAULT_DB_FILENAME


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  value ")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.delenv("MISSING_A", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_rejects_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_platform_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIFTSTEP_API_URL", "https://platform.test/")
    monkeypatch.setenv("GIFTSTEP_AUTH_TOKEN", "secret")
    monkeypatch.setenv("GIFTSTEP_ORGANIZATION_ID", "org-1")

    config = get_platform_config()

    assert config.organization_id == "org-1"
    assert config.resilience.base_url == "https://platform.test"
    assert config.resilience.retry == NO_RETRY
    assert config.resilience.cache is None
    assert config.resilience.default_headers == {"Authorization": "Bearer secret"}


def test_platform_config_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIFTSTEP_API_URL", "https://platform.test")
    monkeypatch.delenv("GIFTSTEP_AUTH_TOKEN", raising=False)
    monkeypatch.delenv("GIFTSTEP_ORGANIZATION_ID", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        get_platform_config()

    assert "GIFTSTEP_AUTH_TOKEN" in str(exc.value)


def test_enrichment_config_limits_and_caches_matches(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PDL_API_KEY", "pdl-key")

    config = get_enrichment_config()
    resilience = config.resilience

    assert config.api_key == "pdl-key"
    assert resilience.ratelimit is not None
    assert resilience.ratelimit.max_calls == 1
    assert resilience.retry.allowed_methods == frozenset({"GET"})
    assert resilience.default_headers is not None
    assert resilience.default_headers["X-API-Key"] == "pdl-key"
    assert resilience.cache is not None
    should_cache = resilience.cache.should_cache
    assert should_cache is not None
    assert should_cache({"status": 200, "data": {}})
    assert not should_cache({"status": 404})
    assert not should_cache(["status", 200])


def test_step_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GIFTSTEP_UNIT_COST", raising=False)
    monkeypatch.delenv("GIFTSTEP_DEFAULT_COUNT", raising=False)

    config = get_step_config()

    assert config.unit_cost == Decimal(25)
    assert config.default_desired_count == 100


def test_step_config_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIFTSTEP_UNIT_COST", "12.50")
    monkeypatch.setenv("GIFTSTEP_DEFAULT_COUNT", "40")

    config = get_step_config()

    assert config.unit_cost == Decimal("12.50")
    assert config.default_desired_count == 40


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("GIFTSTEP_UNIT_COST", "cheap"),
        ("GIFTSTEP_UNIT_COST", "-1"),
        ("GIFTSTEP_DEFAULT_COUNT", "many"),
    ],
)
def test_step_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        get_step_config()


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("GIFTSTEP_DATA_DIR", str(custom))

    assert get_storage_config().root == custom.resolve()


def test_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_config().uri == "sqlite:///override.db"


def test_database_config_creates_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("GIFTSTEP_DATA_DIR", str(tmp_path / "data-dir"))

    uri = get_database_config().uri

    expected_path = (tmp_path / "data-dir" / DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()
