from pathlib import Path

import pytest
from pydantic import ValidationError

from appstage.config import BuildConfig
from appstage.errors import ConfigError


def test_defaults(project: Path) -> None:
    config = BuildConfig(project_root=project)

    assert config.prefix == "/usr"
    assert config.flatpak_prefix == "/app"
    assert config.rootdir == ""
    assert config.staging_policy == "fail"
    assert config.resource_path == project / "res"
    assert config.manifest_path == project / "Cargo.toml"
    assert config.work_dir == project


def test_relative_prefix_is_rejected(project: Path) -> None:
    with pytest.raises(ConfigError):
        BuildConfig(project_root=project, prefix="usr")

    with pytest.raises(ConfigError):
        BuildConfig(project_root=project, flatpak_prefix="app")


def test_missing_project_root(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        BuildConfig(project_root=tmp_path / "absent")


@pytest.mark.parametrize("name", ["", "a/b", "a\\b", ".", ".."])
def test_invalid_name(project: Path, name: str) -> None:
    with pytest.raises(ConfigError):
        BuildConfig(project_root=project, name=name)


def test_icon_pattern_must_be_a_file_glob(project: Path) -> None:
    with pytest.raises(ConfigError):
        BuildConfig(project_root=project, icon_pattern="apps/*.svg")


def test_config_is_frozen(project: Path) -> None:
    config = BuildConfig(project_root=project)

    with pytest.raises(ValidationError):
        config.prefix = "/opt"
