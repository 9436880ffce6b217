from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from appstage.errors import ConfigError


def package_name_problem(name: str) -> Optional[str]:
    """Describe why ``name`` cannot be used as a file name under bin/, or return None."""

    if not name:
        return "Package name cannot be empty"
    if "/" in name or "\\" in name:
        return f"Package name must not contain path separators: {name!r}"
    if name in (".", ".."):
        return f"Package name must not be a relative directory: {name!r}"
    return None


class BuildConfig(BaseModel):
    project_root: Path = Field(
        default_factory=Path.cwd,
        description="Root directory of the application project",
    )

    name: Optional[str] = Field(
        default=None,
        description="Package and binary name (defaults to the descriptor's <binary>)",
    )

    rootdir: str = Field(
        default="",
        description="Directory prepended to the install prefix (DESTDIR)",
    )
    prefix: str = Field(
        default="/usr",
        description="Install prefix for system and native packages",
    )
    flatpak_prefix: str = Field(
        default="/app",
        description="Install prefix inside a flatpak sandbox",
    )

    resource_dir: Path = Field(
        default=Path("res"),
        description="Directory holding the descriptor, desktop entry and icons",
    )
    binary_dir: Path = Field(
        default=Path("target") / "release",
        description="Directory holding the compiled binary",
    )
    manifest: Path = Field(
        default=Path("Cargo.toml"),
        description="Build manifest providing the version",
    )

    license: str = Field(
        default="GPLv3",
        description="License field of the RPM spec",
    )
    group: str = Field(
        default="Applications/Utilities",
        description="Group field of the RPM spec",
    )
    icon_pattern: str = Field(
        default="*.svg",
        description="Glob selecting icon files inside the icon source directory",
    )

    strip: bool = Field(
        default=True,
        description="Strip debug symbols from the binary before installing it",
    )
    strip_tool: str = Field(
        default="strip",
        description="Executable used to strip the binary",
    )
    staging_policy: Literal["fail", "replace"] = Field(
        default="fail",
        description="What to do with a staging directory left by an earlier build",
    )

    @field_validator("project_root")
    @classmethod
    def validate_project_root(cls, value: Path) -> Path:
        if not value.exists():
            raise ConfigError(f"Project root does not exist: {value}")
        if not value.is_dir():
            raise ConfigError(f"Project root is not a directory: {value}")
        return value

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        problem = package_name_problem(value)
        if problem:
            raise ConfigError(problem)
        return value

    @field_validator("prefix", "flatpak_prefix")
    @classmethod
    def validate_prefix(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ConfigError(f"Install prefix must be absolute: {value!r}")
        return value

    @field_validator("icon_pattern")
    @classmethod
    def validate_icon_pattern(cls, value: str) -> str:
        if not value or "/" in value:
            raise ConfigError("Icon pattern must be a single file glob")
        return value

    @property
    def work_dir(self) -> Path:
        return self.project_root

    @property
    def resource_path(self) -> Path:
        return self.project_root / self.resource_dir

    @property
    def manifest_path(self) -> Path:
        return self.project_root / self.manifest

    class Config:
        frozen = True
