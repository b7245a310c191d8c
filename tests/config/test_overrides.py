from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from pickupsync.config import ConfigurationError, get_overrides_config, load_overrides_file
from pickupsync.config.overrides import BUILTIN_OVERRIDES


def test_builtin_overrides_used_without_file() -> None:
    config = get_overrides_config()

    assert config.source == "builtin"
    assert dict(config.entries) == BUILTIN_OVERRIDES
    assert config.entries["2143"] == "5804091048247"


def test_overrides_file_replaces_builtin_table(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    path = tmp_path / "overrides.toml"
    path.write_text('version = 3\n\n[overrides]\n"1001" = "gid://shopify/Order/42"\n"77" = 88\n')
    monkeypatch.setenv("PICKUPSYNC_OVERRIDES_FILE", str(path))

    config = get_overrides_config()

    assert config.version == 3
    assert config.source == str(path)
    assert dict(config.entries) == {"1001": "gid://shopify/Order/42", "77": "88"}


def test_overrides_file_requires_version(tmp_path: Path) -> None:
    path = tmp_path / "overrides.toml"
    path.write_text('[overrides]\n"1" = "2"\n')

    with pytest.raises(ConfigurationError, match="version"):
        load_overrides_file(path)


def test_overrides_file_rejects_blank_targets(tmp_path: Path) -> None:
    path = tmp_path / "overrides.toml"
    path.write_text('version = 1\n\n[overrides]\n"1" = "  "\n')

    with pytest.raises(ConfigurationError, match="'1'"):
        load_overrides_file(path)


def test_overrides_file_reports_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "overrides.toml"
    path.write_text("version = \n")

    with pytest.raises(ConfigurationError, match="not valid TOML"):
        load_overrides_file(path)


def test_missing_overrides_file_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_overrides_file(tmp_path / "absent.toml")
