from __future__ import annotations

import logging
from pathlib import Path

from appstage.assembly.control import render_rpm_spec
from appstage.assembly.formats.staging import StagingPolicy, cleanup_staging, prepare_staging
from appstage.assembly.materialize import materialize, plan_items, strip_binary
from appstage.assembly.paths import (
    InstallRoot,
    SourceSet,
    resolve_paths,
    rpm_staging_name,
)
from appstage.descriptor import CORE_FIELDS, PackageDescriptor
from appstage.errors import BuildError
from appstage.manifest import VersionInfo
from appstage.utils.fs import ensure_dir, move_contents, write_text
from appstage.utils.subprocess import run_command

logger = logging.getLogger(__name__)

SPEC_NAME = "spec.spec"


def build_rpm(
    descriptor: PackageDescriptor,
    version_info: VersionInfo,
    sources: SourceSet,
    *,
    name: str,
    work_dir: Path,
    prefix: str = "/usr",
    license: str = "GPLv3",
    group: str = "Applications/Utilities",
    icon_pattern: str = "*.svg",
    strip: bool = True,
    strip_tool: str = "strip",
    staging_policy: StagingPolicy = "fail",
    rpmbuild: str = "rpmbuild",
) -> list[Path]:
    """Stage a buildroot, write a spec next to it and run rpmbuild.

    The produced packages are moved from rpmbuild's ``<arch>/`` output
    directory into ``work_dir``.
    """

    descriptor.require(*CORE_FIELDS)

    work_dir = work_dir.resolve()
    arch = version_info.architecture
    staging_root = work_dir / rpm_staging_name(name, version_info.version, arch)
    buildroot = staging_root / "BUILDROOT"
    spec_path = staging_root / SPEC_NAME

    prepare_staging(staging_root, policy=staging_policy)

    try:
        ensure_dir(InstallRoot.staging(buildroot, prefix).base_dir)

        if strip:
            strip_binary(sources.binary_path, strip_tool=strip_tool)

        staged = resolve_paths(
            InstallRoot.staging(buildroot, prefix), name, descriptor.app_id
        )
        materialize(
            plan_items(
                sources,
                staged,
                include_metainfo=True,
                icon_pattern=icon_pattern,
            )
        )

        installed = resolve_paths(InstallRoot(prefix), name, descriptor.app_id)
        write_text(
            spec_path,
            render_rpm_spec(
                descriptor,
                name=name,
                version=version_info.version,
                destinations=installed,
                license=license,
                group=group,
                icon_pattern=icon_pattern,
            ),
        )

        logger.info("Running rpmbuild for %s", staging_root.name)
        run_command(
            [
                rpmbuild,
                "-bb",
                f"--buildroot={buildroot}",
                str(spec_path),
                "--define",
                f"_rpmdir {work_dir}",
                "--define",
                f"_topdir {staging_root}",
                "--define",
                f"_buildrootdir {buildroot}",
            ],
            cwd=work_dir,
        )
    finally:
        cleanup_staging(staging_root)

    return _relocate_output(work_dir / arch, work_dir)


def _relocate_output(output_dir: Path, work_dir: Path) -> list[Path]:
    if not output_dir.is_dir():
        raise BuildError(
            f"rpmbuild produced no output directory: {output_dir}"
        )

    moved = move_contents(output_dir, work_dir)
    for package in moved:
        logger.info("Built %s", package)
    return moved
