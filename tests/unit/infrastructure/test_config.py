"""Unit tests for runtime settings and templated configuration."""

from pathlib import Path

import pytest

from src.app.runtime.config.config_data import ConfigData
from src.app.runtime.config.config_template import (
    apply_environment_overrides,
    load_templated_yaml,
    substitute_env_vars,
)
from src.app.runtime.context import get_config, with_context
from src.app.runtime.settings import EnvironmentVariables

CONFIG_TEMPLATE = """
config:
  app:
    name: ${SHOP_NAME:-Corner Shop}
    environment: ${SHOP_ENV:-development}
  jwt:
    secret: ${SHOP_SECRET:-}
  commerce:
    tax_rate: 0.2
"""


class TestSubstitution:
    def test_default_value(self, monkeypatch):
        monkeypatch.delenv("SHOP_NAME", raising=False)
        assert substitute_env_vars("name: ${SHOP_NAME:-Corner Shop}") == "name: Corner Shop"

    def test_environment_value_wins(self, monkeypatch):
        monkeypatch.setenv("SHOP_NAME", "Mega Mart")
        assert substitute_env_vars("${SHOP_NAME:-Corner Shop}") == "Mega Mart"

    def test_required_variable_missing(self, monkeypatch):
        monkeypatch.delenv("SHOP_REQUIRED", raising=False)
        with pytest.raises(ValueError, match="SHOP_REQUIRED not set"):
            substitute_env_vars("${SHOP_REQUIRED}")

    def test_required_variable_custom_message(self, monkeypatch):
        monkeypatch.delenv("SHOP_REQUIRED", raising=False)
        with pytest.raises(ValueError, match="set the key"):
            substitute_env_vars("${SHOP_REQUIRED:?set the key}")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("STAGING_SHOP_NAME", "Staging Shop")
        monkeypatch.setenv("SHOP_NAME", "Corner Shop")

        apply_environment_overrides("staging")

        assert substitute_env_vars("${SHOP_NAME}") == "Staging Shop"


class TestLoadTemplatedYaml:
    def _write(self, tmp_path: Path) -> Path:
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_TEMPLATE)
        return path

    def test_loads_with_defaults(self, tmp_path, monkeypatch):
        for name in ("SHOP_NAME", "SHOP_ENV", "SHOP_SECRET"):
            monkeypatch.delenv(name, raising=False)

        config = load_templated_yaml(self._write(tmp_path))

        assert config.app.name == "Corner Shop"
        assert config.commerce.tax_rate == 0.2
        assert config.jwt.secret is None
        assert config.commerce.free_shipping_threshold == 100

    def test_production_requires_jwt_secret(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SHOP_ENV", "production")
        monkeypatch.delenv("SHOP_SECRET", raising=False)

        with pytest.raises(ValueError, match="jwt.secret"):
            load_templated_yaml(self._write(tmp_path))

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("config:\n  commerce:\n    tax_rate: lots\n")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_templated_yaml(tmp_path / "missing.yaml")


class TestContextOverride:
    def test_override_is_scoped(self):
        original = get_config().commerce.tax_rate
        override = ConfigData()
        override.commerce.tax_rate = 0.25

        with with_context(override):
            assert get_config().commerce.tax_rate == 0.25
            # untouched values are inherited
            assert get_config().commerce.shipping_fee == 10

        assert get_config().commerce.tax_rate == original

    def test_rejects_other_types(self):
        with pytest.raises(ValueError):
            with with_context({"commerce": {}}):  # type: ignore[arg-type]
                pass


class TestEnvironmentVariables:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("APP_ENVIRONMENT", raising=False)
        monkeypatch.delenv("APP_CONFIG_FILE", raising=False)

        env = EnvironmentVariables(_env_file=None)

        assert env.environment == "development"
        assert env.config_file == "config.yaml"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "production")
        monkeypatch.setenv("APP_CONFIG_FILE", "/etc/shop.yaml")

        env = EnvironmentVariables(_env_file=None)

        assert env.environment == "production"
        assert env.config_file == "/etc/shop.yaml"
