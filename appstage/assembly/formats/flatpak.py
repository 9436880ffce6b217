from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from appstage.errors import ConfigError, ExternalToolError
from appstage.utils.fs import ensure_dir
from appstage.utils.subprocess import run_command, run_logged

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlatpakOptions:
    ccache: bool = True
    force_clean: bool = True
    install: bool = False
    install_deps_from: str = "flathub"
    repo: str = "repo"
    sandbox: bool = False
    user: bool = True
    verbose: bool = False
    state_dir: str = "flatpak-out"
    log_dir: str | None = None


BUILD_OPTIONS = FlatpakOptions(sandbox=True, verbose=True, log_dir="log")
INSTALL_OPTIONS = FlatpakOptions(install=True)


def default_arch(flatpak: str = "flatpak") -> str:
    result = run_command([flatpak, "--default-arch"])
    arch = result.stdout.strip()
    if not arch:
        raise ExternalToolError(
            "flatpak --default-arch returned nothing",
            command=[flatpak, "--default-arch"],
        )
    return arch


def manifest_path(work_dir: Path, app_id: str) -> Path:
    return work_dir / f"{app_id}.json"


def build_flatpak_command(
    app_id: str,
    arch: str,
    options: FlatpakOptions,
    *,
    builder: str = "flatpak-builder",
) -> list[str]:
    command = [builder, f"--arch={arch}"]

    if options.ccache:
        command.append("--ccache")
    if options.force_clean:
        command.append("--force-clean")
    if options.install:
        command.append("--install")
    if options.install_deps_from:
        command.append(f"--install-deps-from={options.install_deps_from}")
    if options.repo:
        command.append(f"--repo={options.repo}")
    if options.sandbox:
        command.append("--sandbox")
    if options.user:
        command.append("--user")
    if options.verbose:
        command.append("--verbose")

    command.append(f"{options.state_dir}/{arch}")
    command.append(f"{app_id}.json")
    return command


def build_flatpak(
    app_id: str,
    *,
    work_dir: Path,
    options: FlatpakOptions = BUILD_OPTIONS,
    arch: str | None = None,
    builder: str = "flatpak-builder",
) -> Path:
    """Run flatpak-builder for ``<app_id>.json`` and return its state directory.

    flatpak-builder owns the sandbox filesystem, so nothing is staged here.
    """

    manifest = manifest_path(work_dir, app_id)
    if not manifest.is_file():
        raise ConfigError(f"Flatpak manifest not found: {manifest}")

    arch = arch or default_arch()
    command = build_flatpak_command(app_id, arch, options, builder=builder)

    logger.info("Running flatpak-builder for %s (%s)", app_id, arch)

    if options.log_dir is None:
        run_command(command, cwd=work_dir, capture_output=False)
        return work_dir / options.state_dir / arch

    log_dir = work_dir / options.log_dir
    ensure_dir(log_dir)
    log_file = log_dir / f"{arch}.txt"

    result = run_logged(command, log_file=log_file, cwd=work_dir)
    logger.info("Build log written to %s", log_file)

    if result.returncode != 0:
        raise ExternalToolError(
            f"Command failed: {' '.join(command)}\nExit code: {result.returncode}\nSee {log_file}",
            command=command,
            returncode=result.returncode,
        )

    return work_dir / options.state_dir / arch
