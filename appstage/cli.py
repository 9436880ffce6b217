import sys
from pathlib import Path
from typing import Optional

import typer

from appstage.assembly.formats.deb import build_deb
from appstage.assembly.formats.flatpak import (
    BUILD_OPTIONS,
    INSTALL_OPTIONS,
    FlatpakOptions,
    build_flatpak,
)
from appstage.assembly.formats.rpm import build_rpm
from appstage.assembly.install import install as install_files
from appstage.assembly.install import select_root
from appstage.assembly.install import uninstall as uninstall_files
from appstage.assembly.paths import resolve_paths
from appstage.assembly.project import load_project
from appstage.config import BuildConfig
from appstage.descriptor import CORE_FIELDS
from appstage.errors import AppstageError
from appstage.logger import setup_logger
from appstage.manifest import read_version_info


app = typer.Typer(
    name="appstage",
    help="Appstage: install a compiled application or package it as deb, rpm or flatpak",
    add_completion=False,
)

PROJECT_ROOT_OPTION = typer.Option(
    Path("."),
    "--project-root",
    "-C",
    help="Project directory holding Cargo.toml, res/ and target/",
)
NAME_OPTION = typer.Option(
    None,
    "--name",
    "-n",
    help="Package name (defaults to the descriptor's <binary>)",
)
ROOTDIR_OPTION = typer.Option(
    "",
    "--rootdir",
    envvar="APPSTAGE_ROOTDIR",
    help="Directory prepended to the install prefix",
)
PREFIX_OPTION = typer.Option(
    "/usr",
    "--prefix",
    envvar="APPSTAGE_PREFIX",
    help="Install prefix",
)
FLATPAK_PREFIX_OPTION = typer.Option(
    "/app",
    "--flatpak-prefix",
    envvar="APPSTAGE_FLATPAK_PREFIX",
    help="Install prefix inside the flatpak sandbox",
)
STRIP_OPTION = typer.Option(
    True,
    "--strip/--no-strip",
    help="Strip debug symbols from the binary before installing it",
)
REPLACE_STALE_OPTION = typer.Option(
    False,
    "--replace-stale",
    help="Remove a staging directory left by an earlier build instead of failing",
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
):

    setup_logger(verbose=verbose)


def _config(
    project_root: Path,
    name: Optional[str],
    *,
    rootdir: str = "",
    prefix: str = "/usr",
    flatpak_prefix: str = "/app",
    strip: bool = True,
    replace_stale: bool = False,
) -> BuildConfig:
    return BuildConfig(
        project_root=project_root.resolve(),
        name=name,
        rootdir=rootdir,
        prefix=prefix,
        flatpak_prefix=flatpak_prefix,
        strip=strip,
        staging_policy="replace" if replace_stale else "fail",
    )


def _fail(exc: AppstageError) -> None:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    sys.exit(exc.exit_code)


@app.command()
def install(
    project_root: Path = PROJECT_ROOT_OPTION,
    name: Optional[str] = NAME_OPTION,
    rootdir: str = ROOTDIR_OPTION,
    prefix: str = PREFIX_OPTION,
    flatpak_prefix: str = FLATPAK_PREFIX_OPTION,
    flatpak: bool = typer.Option(
        False,
        "--flatpak",
        help="Install under the flatpak prefix instead of the system prefix",
    ),
    strip: bool = STRIP_OPTION,
):
    """Install the binary, desktop entry, metainfo and icons."""

    try:
        config = _config(
            project_root,
            name,
            rootdir=rootdir,
            prefix=prefix,
            flatpak_prefix=flatpak_prefix,
            strip=strip,
        )
        installed = install_files(config, flatpak=flatpak)
        for path in installed:
            typer.echo(f" - {path}")
        typer.echo(f"Installed {len(installed)} files")

    except AppstageError as exc:
        _fail(exc)


@app.command()
def uninstall(
    project_root: Path = PROJECT_ROOT_OPTION,
    name: Optional[str] = NAME_OPTION,
    rootdir: str = ROOTDIR_OPTION,
    prefix: str = PREFIX_OPTION,
    flatpak_prefix: str = FLATPAK_PREFIX_OPTION,
    flatpak: bool = typer.Option(
        False,
        "--flatpak",
        help="Remove from the flatpak prefix instead of the system prefix",
    ),
):
    """Remove the files install created."""

    try:
        config = _config(
            project_root,
            name,
            rootdir=rootdir,
            prefix=prefix,
            flatpak_prefix=flatpak_prefix,
        )
        removed = uninstall_files(config, flatpak=flatpak)
        for path in removed:
            typer.echo(f" - {path}")
        typer.echo(f"Removed {len(removed)} files")

    except AppstageError as exc:
        _fail(exc)


@app.command("build-deb")
def build_deb_command(
    project_root: Path = PROJECT_ROOT_OPTION,
    name: Optional[str] = NAME_OPTION,
    prefix: str = PREFIX_OPTION,
    strip: bool = STRIP_OPTION,
    replace_stale: bool = REPLACE_STALE_OPTION,
):
    """Build a Debian package with dpkg-deb."""

    try:
        config = _config(
            project_root,
            name,
            prefix=prefix,
            strip=strip,
            replace_stale=replace_stale,
        )
        project = load_project(config)
        version_info = read_version_info(config.manifest_path, "deb")

        typer.echo(
            f"Building {project.name} {version_info.version} ({version_info.architecture}) deb"
        )
        artifact = build_deb(
            project.descriptor,
            version_info,
            project.sources,
            name=project.name,
            work_dir=config.work_dir,
            prefix=config.prefix,
            icon_pattern=config.icon_pattern,
            strip=config.strip,
            strip_tool=config.strip_tool,
            staging_policy=config.staging_policy,
        )
        typer.echo("Build complete!")
        typer.echo(f"Package created at: {artifact}")

    except AppstageError as exc:
        _fail(exc)


@app.command("build-rpm")
def build_rpm_command(
    project_root: Path = PROJECT_ROOT_OPTION,
    name: Optional[str] = NAME_OPTION,
    prefix: str = PREFIX_OPTION,
    strip: bool = STRIP_OPTION,
    replace_stale: bool = REPLACE_STALE_OPTION,
):
    """Build an RPM package with rpmbuild."""

    try:
        config = _config(
            project_root,
            name,
            prefix=prefix,
            strip=strip,
            replace_stale=replace_stale,
        )
        project = load_project(config)
        version_info = read_version_info(config.manifest_path, "rpm")

        typer.echo(
            f"Building {project.name} {version_info.version} ({version_info.architecture}) rpm"
        )
        artifacts = build_rpm(
            project.descriptor,
            version_info,
            project.sources,
            name=project.name,
            work_dir=config.work_dir,
            prefix=config.prefix,
            license=config.license,
            group=config.group,
            icon_pattern=config.icon_pattern,
            strip=config.strip,
            strip_tool=config.strip_tool,
            staging_policy=config.staging_policy,
        )
        typer.echo("Build complete!")
        for artifact in artifacts:
            typer.echo(f"Package created at: {artifact}")

    except AppstageError as exc:
        _fail(exc)


def _run_flatpak(project_root: Path, options: FlatpakOptions) -> None:
    try:
        config = _config(project_root, None)
        project = load_project(config, required=("app_id",))

        typer.echo(f"Building flatpak {project.descriptor.app_id}")
        state_dir = build_flatpak(
            project.descriptor.app_id,
            work_dir=config.work_dir,
            options=options,
        )
        typer.echo("Build complete!")
        typer.echo(f"Build directory: {state_dir}")

    except AppstageError as exc:
        _fail(exc)


@app.command("build-flatpak")
def flatpak_build_command(
    project_root: Path = PROJECT_ROOT_OPTION,
):
    """Build the flatpak in a sandbox and export it to ./repo."""

    _run_flatpak(project_root, BUILD_OPTIONS)


@app.command("build-flatpak-install")
def flatpak_install_command(
    project_root: Path = PROJECT_ROOT_OPTION,
):
    """Build the flatpak and install it for the current user."""

    _run_flatpak(project_root, INSTALL_OPTIONS)


@app.command()
def info(
    project_root: Path = PROJECT_ROOT_OPTION,
    name: Optional[str] = NAME_OPTION,
    rootdir: str = ROOTDIR_OPTION,
    prefix: str = PREFIX_OPTION,
    flatpak_prefix: str = FLATPAK_PREFIX_OPTION,
):
    """Print the metadata and install paths derived for this project."""

    try:
        config = _config(
            project_root,
            name,
            rootdir=rootdir,
            prefix=prefix,
            flatpak_prefix=flatpak_prefix,
        )
        project = load_project(config, required=("app_id",))
        descriptor = project.descriptor

        typer.echo(f"descriptor:  {descriptor.source}")
        typer.echo(f"name:        {project.name}")
        typer.echo(f"app id:      {descriptor.app_id}")
        typer.echo(f"summary:     {descriptor.summary}")
        typer.echo(f"maintainer:  {descriptor.maintainer}")

        missing = [field for field in CORE_FIELDS if not getattr(descriptor, field)]
        if missing:
            typer.secho(
                "missing (deb/rpm will fail): " + ", ".join(missing),
                fg=typer.colors.YELLOW,
            )

        for ecosystem in ("deb", "rpm"):
            version_info = read_version_info(config.manifest_path, ecosystem)
            typer.echo(
                f"{ecosystem}:         {version_info.version} {version_info.architecture}"
            )

        for label, flatpak in (("system", False), ("flatpak", True)):
            destinations = resolve_paths(
                select_root(config, flatpak=flatpak), project.name, descriptor.app_id
            )
            typer.echo(f"{label} paths:")
            typer.echo(f" - {destinations.binary_path}")
            typer.echo(f" - {destinations.desktop_entry_path}")
            typer.echo(f" - {destinations.metainfo_path}")
            typer.echo(f" - {destinations.icon_glob(config.icon_pattern)}")

    except AppstageError as exc:
        _fail(exc)


def run_cli() -> None:
    app()


if __name__ == "__main__":
    run_cli()
