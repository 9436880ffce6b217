import os
import shutil
from pathlib import Path
from typing import Optional

from appstage.errors import IoError


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IoError(
            "Failed to create directory", path
        ) from exc


def remove_dir(path: Path) -> None:
    try:
        if path.exists():
            shutil.rmtree(path)
    except OSError as exc:
        raise IoError(
            "Failed to remove directory", path
        ) from exc


def install_file(source: Path, destination: Path, mode: int) -> None:
    """Copy ``source`` to ``destination`` and set its mode, like ``install -D -m``."""

    ensure_dir(destination.parent)

    try:
        shutil.copyfile(source, destination)
    except OSError as exc:
        raise IoError(
            f"Failed to install {source}", destination
        ) from exc

    try:
        os.chmod(destination, mode)
    except OSError as exc:
        raise IoError(
            f"Failed to set mode {mode:04o}", destination
        ) from exc


def remove_file(path: Path) -> None:
    try:
        path.unlink()
    except OSError as exc:
        raise IoError(
            "Failed to remove file", path
        ) from exc


def move_contents(source_dir: Path, destination_dir: Path) -> list[Path]:
    """Move every entry of ``source_dir`` into ``destination_dir`` and drop the empty directory."""

    moved: list[Path] = []

    try:
        for entry in sorted(source_dir.iterdir()):
            target = destination_dir / entry.name
            shutil.move(str(entry), str(target))
            moved.append(target)
        source_dir.rmdir()
    except OSError as exc:
        raise IoError(
            "Failed to relocate build output", source_dir
        ) from exc

    return moved


def write_text(path: Path, content: str, mode: Optional[int] = None) -> None:
    try:
        path.write_text(content, encoding="utf-8")
        if mode is not None:
            os.chmod(path, mode)
    except OSError as exc:
        raise IoError(
            "Failed to write file", path
        ) from exc
