import logging
import platform
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from appstage.errors import ConfigError, MissingFieldError

logger = logging.getLogger(__name__)

Ecosystem = Literal["deb", "rpm"]

DEB_ARCHITECTURES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armhf",
    "armv6l": "armel",
    "i386": "i386",
    "i486": "i386",
    "i586": "i386",
    "i686": "i386",
    "ppc64le": "ppc64el",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "loongarch64": "loong64",
}

RPM_ARCHITECTURES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "armv7l": "armv7hl",
    "i386": "i686",
    "i486": "i686",
    "i586": "i686",
    "i686": "i686",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "loongarch64": "loongarch64",
}

_TABLES = {
    "deb": DEB_ARCHITECTURES,
    "rpm": RPM_ARCHITECTURES,
}


@dataclass(frozen=True)
class VersionInfo:
    version: str
    architecture: str


def normalize_architecture(machine: str, ecosystem: Ecosystem) -> str:
    """Map a kernel machine name to the ecosystem's architecture token.

    Names missing from the table are returned unchanged.
    """

    table = _TABLES[ecosystem]
    return table.get(machine.lower(), machine)


def host_machine() -> str:
    return platform.machine()


def read_version(manifest: Path) -> str:
    try:
        data = tomllib.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Build manifest not found: {manifest}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read build manifest: {manifest}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid build manifest {manifest}: {exc}") from exc

    version = data.get("package", {}).get("version")

    # version.workspace = true
    if isinstance(version, dict) or version is None:
        version = data.get("workspace", {}).get("package", {}).get("version")

    if not isinstance(version, str) or not version:
        raise MissingFieldError("version", manifest)

    return version


def read_version_info(
    manifest: Path,
    ecosystem: Ecosystem,
    *,
    machine: Optional[str] = None,
) -> VersionInfo:
    machine = machine or host_machine()
    info = VersionInfo(
        version=read_version(manifest),
        architecture=normalize_architecture(machine, ecosystem),
    )
    logger.debug("Resolved %s version info: %s", ecosystem, info)
    return info
