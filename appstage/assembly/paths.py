import os
from dataclasses import dataclass
from pathlib import Path

ICONS_SUBDIR = Path("share") / "icons" / "hicolor" / "scalable" / "apps"


def _clean(path: str) -> Path:
    # normpath keeps a leading "//" on POSIX
    if path.startswith("//"):
        path = "/" + path.lstrip("/")
    return Path(os.path.normpath(path))


def _under(overlay: str, prefix: str) -> str:
    # Plain string concatenation: joining with "/" would let an absolute
    # prefix discard the overlay.
    return overlay.rstrip("/") + "/" + prefix.lstrip("/")


@dataclass(frozen=True)
class InstallRoot:
    base_prefix: str
    root_overlay: str = ""

    @classmethod
    def system(cls, rootdir: str, prefix: str) -> "InstallRoot":
        return cls(base_prefix=prefix, root_overlay=rootdir)

    @classmethod
    def flatpak(cls, rootdir: str, flatpak_prefix: str) -> "InstallRoot":
        return cls(base_prefix=flatpak_prefix, root_overlay=rootdir)

    @classmethod
    def staging(cls, staging_dir: Path, prefix: str) -> "InstallRoot":
        return cls(base_prefix=prefix, root_overlay=str(staging_dir))

    @property
    def base_dir(self) -> Path:
        if not self.root_overlay:
            return _clean(self.base_prefix)
        return _clean(os.path.abspath(_under(self.root_overlay, self.base_prefix)))


@dataclass(frozen=True)
class DestinationSet:
    binary_path: Path
    desktop_entry_path: Path
    metainfo_path: Path
    icons_dir: Path

    def icon_glob(self, pattern: str = "*.svg") -> Path:
        return self.icons_dir / pattern


@dataclass(frozen=True)
class SourceSet:
    binary_path: Path
    desktop_entry_path: Path
    metainfo_path: Path
    icons_dir: Path


def desktop_file_name(app_id: str) -> str:
    return f"{app_id}.desktop"


def metainfo_file_name(app_id: str) -> str:
    return f"{app_id}.metainfo.xml"


def resolve_paths(install_root: InstallRoot, name: str, app_id: str) -> DestinationSet:
    base = install_root.base_dir

    return DestinationSet(
        binary_path=_clean(str(base / "bin" / name)),
        desktop_entry_path=_clean(
            str(base / "share" / "applications" / desktop_file_name(app_id))
        ),
        metainfo_path=_clean(
            str(base / "share" / "metainfo" / metainfo_file_name(app_id))
        ),
        icons_dir=_clean(str(base / ICONS_SUBDIR)),
    )


def resolve_sources(
    project_root: Path,
    *,
    resource_dir: Path,
    binary_dir: Path,
    name: str,
    app_id: str,
) -> SourceSet:
    resources = project_root / resource_dir

    return SourceSet(
        binary_path=project_root / binary_dir / name,
        desktop_entry_path=resources / desktop_file_name(app_id),
        metainfo_path=resources / metainfo_file_name(app_id),
        icons_dir=resources / "icons" / "apps",
    )


def deb_staging_name(name: str, version: str, architecture: str) -> str:
    return f"{name}_{version}_{architecture}"


def rpm_staging_name(name: str, version: str, architecture: str) -> str:
    return f"{name}-{version}-1.{architecture}"
