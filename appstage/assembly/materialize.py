import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from appstage.assembly.paths import DestinationSet, SourceSet
from appstage.errors import IoError
from appstage.utils.fs import install_file, remove_file
from appstage.utils.subprocess import run_command

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755
DATA_MODE = 0o644


@dataclass(frozen=True)
class InstallItem:
    source: Path
    destination: Path
    mode: int


def strip_binary(binary: Path, *, strip_tool: str = "strip") -> None:
    """Strip debug symbols from ``binary`` in place.

    Callers run this once per build, before any item is materialized.
    """

    if not binary.is_file():
        raise IoError("Binary not found", binary)

    logger.info("Stripping %s", binary)
    run_command([strip_tool, str(binary)])


def icon_sources(icons_dir: Path, pattern: str = "*.svg") -> list[Path]:
    if not icons_dir.is_dir():
        raise IoError("Icon directory not found", icons_dir)

    return sorted(path for path in icons_dir.glob(pattern) if path.is_file())


def plan_items(
    sources: SourceSet,
    destinations: DestinationSet,
    *,
    include_metainfo: bool = True,
    icon_pattern: str = "*.svg",
) -> list[InstallItem]:
    items = [
        InstallItem(sources.binary_path, destinations.binary_path, EXECUTABLE_MODE),
        InstallItem(
            sources.desktop_entry_path,
            destinations.desktop_entry_path,
            DATA_MODE,
        ),
    ]

    if include_metainfo:
        items.append(
            InstallItem(sources.metainfo_path, destinations.metainfo_path, DATA_MODE)
        )

    for icon in icon_sources(sources.icons_dir, icon_pattern):
        items.append(
            InstallItem(icon, destinations.icons_dir / icon.name, DATA_MODE)
        )

    return items


def materialize(items: Iterable[InstallItem]) -> list[Path]:
    installed: list[Path] = []

    for item in items:
        if not item.source.is_file():
            raise IoError("Source file not found", item.source)

        logger.debug(
            "Installing %s -> %s (%04o)", item.source, item.destination, item.mode
        )
        install_file(item.source, item.destination, item.mode)
        installed.append(item.destination)

    return installed


def remove_items(items: Iterable[InstallItem]) -> list[Path]:
    """Remove every planned destination, then report the first one that failed.

    A missing file does not stop the rest from being removed.
    """

    removed: list[Path] = []
    failures: list[IoError] = []

    for item in items:
        logger.debug("Removing %s", item.destination)
        try:
            remove_file(item.destination)
        except IoError as exc:
            logger.warning("Could not remove %s", exc.path)
            failures.append(exc)
            continue
        removed.append(item.destination)

    if failures:
        raise failures[0]

    return removed
