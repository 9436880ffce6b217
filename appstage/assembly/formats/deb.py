from __future__ import annotations

import logging
from pathlib import Path

from appstage.assembly.control import render_deb_control
from appstage.assembly.formats.staging import StagingPolicy, cleanup_staging, prepare_staging
from appstage.assembly.materialize import DATA_MODE, materialize, plan_items, strip_binary
from appstage.assembly.paths import (
    InstallRoot,
    SourceSet,
    deb_staging_name,
    resolve_paths,
)
from appstage.descriptor import CORE_FIELDS, PackageDescriptor
from appstage.manifest import VersionInfo
from appstage.utils.fs import ensure_dir, write_text
from appstage.utils.subprocess import run_command

logger = logging.getLogger(__name__)


def build_deb(
    descriptor: PackageDescriptor,
    version_info: VersionInfo,
    sources: SourceSet,
    *,
    name: str,
    work_dir: Path,
    prefix: str = "/usr",
    icon_pattern: str = "*.svg",
    strip: bool = True,
    strip_tool: str = "strip",
    staging_policy: StagingPolicy = "fail",
    dpkg_deb: str = "dpkg-deb",
) -> Path:
    """Stage, describe and pack a ``.deb`` into ``work_dir``."""

    descriptor.require(*CORE_FIELDS)

    work_dir = work_dir.resolve()
    staging_name = deb_staging_name(
        name, version_info.version, version_info.architecture
    )
    staging_root = work_dir / staging_name
    control_dir = staging_root / "DEBIAN"

    prepare_staging(staging_root, policy=staging_policy)

    try:
        ensure_dir(control_dir)

        if strip:
            strip_binary(sources.binary_path, strip_tool=strip_tool)

        destinations = resolve_paths(
            InstallRoot.staging(staging_root, prefix), name, descriptor.app_id
        )
        items = plan_items(
            sources,
            destinations,
            include_metainfo=False,
            icon_pattern=icon_pattern,
        )
        materialize(items)

        write_text(
            control_dir / "control",
            render_deb_control(
                descriptor,
                name=name,
                version=version_info.version,
                architecture=version_info.architecture,
            ),
            mode=DATA_MODE,
        )

        logger.info("Running dpkg-deb for %s", staging_name)
        run_command(
            [dpkg_deb, "--build", "--root-owner-group", staging_name],
            cwd=work_dir,
        )
    finally:
        cleanup_staging(staging_root)

    return work_dir / f"{staging_name}.deb"
