import logging
from pathlib import Path

from appstage.assembly.materialize import (
    InstallItem,
    materialize,
    plan_items,
    remove_items,
    strip_binary,
)
from appstage.assembly.paths import InstallRoot, resolve_paths
from appstage.assembly.project import Project, load_project
from appstage.config import BuildConfig

logger = logging.getLogger(__name__)

INSTALL_FIELDS = ("app_id",)


def select_root(config: BuildConfig, *, flatpak: bool = False) -> InstallRoot:
    if flatpak:
        return InstallRoot.flatpak(config.rootdir, config.flatpak_prefix)
    return InstallRoot.system(config.rootdir, config.prefix)


def _plan(config: BuildConfig, project: Project, root: InstallRoot) -> list[InstallItem]:
    destinations = resolve_paths(root, project.name, project.descriptor.app_id)
    return plan_items(
        project.sources,
        destinations,
        include_metainfo=True,
        icon_pattern=config.icon_pattern,
    )


def install(config: BuildConfig, *, flatpak: bool = False) -> list[Path]:
    project = load_project(config, required=INSTALL_FIELDS)
    root = select_root(config, flatpak=flatpak)
    items = _plan(config, project, root)

    if config.strip:
        strip_binary(project.sources.binary_path, strip_tool=config.strip_tool)

    logger.info("Installing %s under %s", project.name, root.base_dir)
    return materialize(items)


def uninstall(config: BuildConfig, *, flatpak: bool = False) -> list[Path]:
    """Remove what :func:`install` puts in place.

    Icons are enumerated from the icon source directory, so only icon files
    this project installs are removed from the shared hicolor tree.
    """

    project = load_project(config, required=INSTALL_FIELDS)
    root = select_root(config, flatpak=flatpak)
    items = _plan(config, project, root)

    logger.info("Uninstalling %s from %s", project.name, root.base_dir)
    return remove_items(items)
