"""Render package metadata for dpkg-deb and rpmbuild.

Both renderers are pure and emit their fields in a fixed order so that two
builds from the same inputs produce byte-identical metadata.
"""

from appstage.assembly.paths import DestinationSet
from appstage.descriptor import PackageDescriptor


def render_deb_control(
    descriptor: PackageDescriptor,
    *,
    name: str,
    version: str,
    architecture: str,
) -> str:
    lines = [
        f"Package: {name}",
        f"Version: {version}",
        f"Architecture: {architecture}",
        f"Maintainer: {descriptor.maintainer}",
        f"Description: {descriptor.summary}",
    ]
    return "\n".join(lines) + "\n"


def render_rpm_spec(
    descriptor: PackageDescriptor,
    *,
    name: str,
    version: str,
    destinations: DestinationSet,
    license: str = "GPLv3",
    group: str = "Applications/Utilities",
    icon_pattern: str = "*.svg",
) -> str:
    """Render a binary-only spec.

    ``destinations`` must be resolved against the bare install prefix: the
    ``%files`` list names where files land on the target system, not where
    they sit in the buildroot. Icons are listed as a glob; the renderer never looks
    at which icon files exist.
    """

    lines = [
        f"Name: {name}",
        f"Version: {version}",
        "Release: 1%{?dist}",
        f"Summary: {descriptor.summary}",
        "",
        f"License: {license}",
        f"Group: {group}",
        "%description",
        descriptor.summary,
        "",
        "%files",
        "%defattr(-,root,root,-)",
        destinations.binary_path.as_posix(),
        destinations.desktop_entry_path.as_posix(),
        destinations.metainfo_path.as_posix(),
        destinations.icon_glob(icon_pattern).as_posix(),
    ]
    return "\n".join(lines) + "\n"
