"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from scouty.config import Config, load_config
from scouty.errors import ConfigError
from scouty.matrix import MATRIX_URL


def write_yaml(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "scouty.yaml"
    path.write_text(text)
    return path


class TestLoadConfig:
    """Tests for merging file, environment and flags."""

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = write_yaml(
            tmp_path,
            "stashes:\n- S1\n- S2\nerror_interval: 5\nhook_new_session_path: /h/new.sh\n",
        )
        config = load_config(path, env={})

        assert config.stashes == ("S1", "S2")
        assert config.error_interval == 5
        assert config.hook_new_session_path == "/h/new.sh"
        assert config.matrix_url == MATRIX_URL
        assert config.feed == "-"

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path, "stashes: [S1]\nis_short: false\n")
        config = load_config(
            path, env={"SCOUTY_STASHES": "S2, S3", "SCOUTY_IS_SHORT": "true", "OTHER": "x"}
        )
        assert config.stashes == ("S2", "S3")
        assert config.is_short

    def test_overrides_win(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path, "stashes: [S1]\nerror_interval: 5\n")
        config = load_config(
            path,
            env={"SCOUTY_ERROR_INTERVAL": "10"},
            overrides={"error_interval": 15, "is_debug": None},
        )
        assert config.error_interval == 15
        assert not config.is_debug

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "absent.yaml", env={})

    def test_default_file_is_optional(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        config = load_config(env={"SCOUTY_STASHES": "S1"})
        assert config.stashes == ("S1",)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path, "stashes: [S1\n")
        with pytest.raises(ConfigError):
            load_config(path, env={})

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path, "- S1\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path, env={})

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path, "stashes: [S1]\nfavourite_colour: blue\n")
        with pytest.raises(ConfigError):
            load_config(path, env={})

    def test_stashes_required(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path, "stashes: []\n")
        with pytest.raises(ConfigError, match="at least one stash"):
            load_config(path, env={})

    def test_error_interval_positive(self, tmp_path: Path) -> None:
        path = write_yaml(tmp_path, "stashes: [S1]\nerror_interval: 0\n")
        with pytest.raises(ConfigError, match="positive"):
            load_config(path, env={})


class TestExposure:
    """Tests for optional hook argument exposure."""

    def test_defaults_hidden(self) -> None:
        config = Config(stashes=("S1",))
        assert not config.exposes_network
        assert not config.exposes_authored_blocks
        assert not config.exposes_para_validator

    def test_expose_all(self) -> None:
        config = Config(stashes=("S1",), expose_all=True)
        assert config.exposes_network
        assert config.exposes_authored_blocks
        assert config.exposes_para_validator

    def test_individual(self) -> None:
        config = Config(stashes=("S1",), expose_authored_blocks=True)
        assert config.exposes_authored_blocks
        assert not config.exposes_network
