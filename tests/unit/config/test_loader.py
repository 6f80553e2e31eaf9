"""Tests for configuration loader."""

from pathlib import Path

import pytest

from dropstitch.config.loader import ConfigLoader
from dropstitch.core import ConfigError
from dropstitch.git.reflog import UnknownOperationPolicy


def make_loader(tmp_path: Path, **environ: str) -> ConfigLoader:
    return ConfigLoader(
        user_dir=tmp_path / "user",
        project_dir=tmp_path / "project",
        environ=dict(environ),
    )


class TestConfigLoaderInit:
    """Tests for ConfigLoader initialization."""

    def test_default_directories(self) -> None:
        """Test default directory paths."""
        loader = ConfigLoader()
        assert loader.user_dir == Path.home() / ".dropstitch"
        assert loader.project_dir == Path.cwd() / ".dropstitch"

    def test_custom_directories(self, tmp_path: Path) -> None:
        """Test custom directory paths."""
        loader = make_loader(tmp_path)
        assert loader.user_dir == tmp_path / "user"
        assert loader.project_dir == tmp_path / "project"

    def test_for_repository(self, tmp_path: Path) -> None:
        """Test project settings live in the repository root."""
        loader = ConfigLoader.for_repository(tmp_path)
        assert loader.project_dir == tmp_path / ".dropstitch"


class TestConfigLoaderLoadAll:
    """Tests for ConfigLoader.load_all()."""

    def test_load_defaults_only(self, tmp_path: Path) -> None:
        """Test loading with no config files returns defaults."""
        config = make_loader(tmp_path).load_all()

        assert config.history.unknown_operations is UnknownOperationPolicy.SKIP
        assert config.history.ledger_dir == "dropstitch"
        assert config.git.executable == "git"

    def test_load_user_json(self, tmp_path: Path) -> None:
        """Test loading user JSON configuration."""
        user_dir = tmp_path / "user"
        user_dir.mkdir()
        (user_dir / "settings.json").write_text('{"history": {"ledger_dir": "user-ledger"}}')

        config = make_loader(tmp_path).load_all()

        assert config.history.ledger_dir == "user-ledger"

    def test_load_user_yaml(self, tmp_path: Path) -> None:
        """Test loading user YAML configuration."""
        user_dir = tmp_path / "user"
        user_dir.mkdir()
        (user_dir / "settings.yaml").write_text("git:\n  timeout: 42\n")

        config = make_loader(tmp_path).load_all()

        assert config.git.timeout == 42

    def test_user_json_preferred_over_yaml(self, tmp_path: Path) -> None:
        """Test JSON takes precedence over YAML in user dir."""
        user_dir = tmp_path / "user"
        user_dir.mkdir()
        (user_dir / "settings.json").write_text('{"git": {"timeout": 11}}')
        (user_dir / "settings.yaml").write_text("git:\n  timeout: 22\n")

        config = make_loader(tmp_path).load_all()

        assert config.git.timeout == 11

    def test_project_overrides_user(self, tmp_path: Path) -> None:
        """Test project config overrides user config key by key."""
        user_dir = tmp_path / "user"
        user_dir.mkdir()
        (user_dir / "settings.json").write_text(
            '{"git": {"executable": "/opt/git", "timeout": 30}}'
        )
        project_dir = tmp_path / "project"
        project_dir.mkdir()
        (project_dir / "settings.yaml").write_text("git:\n  timeout: 5\n")

        config = make_loader(tmp_path).load_all()

        assert config.git.timeout == 5
        assert config.git.executable == "/opt/git"

    def test_env_overrides_files(self, tmp_path: Path) -> None:
        """Test environment variables override every file."""
        project_dir = tmp_path / "project"
        project_dir.mkdir()
        (project_dir / "settings.json").write_text('{"history": {"unknown_operations": "skip"}}')

        config = make_loader(tmp_path, DROPSTITCH_UNKNOWN_OPERATIONS="error").load_all()

        assert config.history.unknown_operations is UnknownOperationPolicy.ERROR

    def test_invalid_file_continues(self, tmp_path: Path) -> None:
        """Test an unreadable file is skipped rather than fatal."""
        user_dir = tmp_path / "user"
        user_dir.mkdir()
        (user_dir / "settings.json").write_text("{broken")

        config = make_loader(tmp_path).load_all()

        assert config.git.timeout == 10

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        """Test a value that fails validation is a ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            make_loader(tmp_path, DROPSTITCH_GIT_TIMEOUT="soon").load_all()

        assert exc_info.value.exit_code == 1
        assert exc_info.value.user_message().startswith("Configuration error:")


class TestConfigLoaderMerge:
    """Tests for ConfigLoader.merge()."""

    def test_merge_simple(self) -> None:
        """Test simple key override."""
        loader = ConfigLoader()
        assert loader.merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_merge_nested(self) -> None:
        """Test nested dictionaries are merged."""
        loader = ConfigLoader()
        result = loader.merge({"git": {"timeout": 10, "executable": "git"}}, {"git": {"timeout": 20}})
        assert result == {"git": {"timeout": 20, "executable": "git"}}

    def test_merge_replaces_non_dict(self) -> None:
        """Test non-dict values are replaced."""
        loader = ConfigLoader()
        assert loader.merge({"a": {"b": 1}}, {"a": "flat"}) == {"a": "flat"}

    def test_merge_preserves_base(self) -> None:
        """Test merge does not modify its inputs."""
        loader = ConfigLoader()
        base = {"git": {"timeout": 10}}
        loader.merge(base, {"git": {"timeout": 20}})
        assert base == {"git": {"timeout": 10}}


class TestConfigLoaderLoad:
    """Tests for ConfigLoader.load()."""

    def test_load_json(self, tmp_path: Path) -> None:
        """Test loading a JSON file."""
        path = tmp_path / "config.json"
        path.write_text('{"git": {"timeout": 3}}')
        assert ConfigLoader().load(path) == {"git": {"timeout": 3}}

    def test_load_yml(self, tmp_path: Path) -> None:
        """Test loading a .yml file."""
        path = tmp_path / "config.yml"
        path.write_text("git:\n  timeout: 3\n")
        assert ConfigLoader().load(path) == {"git": {"timeout": 3}}

    def test_load_unsupported_format(self, tmp_path: Path) -> None:
        """Test unsupported file format raises error."""
        path = tmp_path / "config.toml"
        path.write_text("[git]\n")

        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader().load(path)

        assert "Unsupported" in str(exc_info.value)
