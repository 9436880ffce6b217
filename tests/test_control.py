from appstage.assembly.control import render_deb_control, render_rpm_spec
from appstage.assembly.paths import InstallRoot, resolve_paths
from appstage.descriptor import PackageDescriptor

DESCRIPTOR = PackageDescriptor(
    app_id="io.example.Foo",
    summary="Shows foo in the panel",
    developer_name="Jane Doe",
    contact_email="jane@example.com",
    binary="foo",
)


def test_deb_control_has_five_fields_in_order() -> None:
    control = render_deb_control(
        DESCRIPTOR, name="foo", version="1.2.3", architecture="amd64"
    )

    assert control.splitlines() == [
        "Package: foo",
        "Version: 1.2.3",
        "Architecture: amd64",
        "Maintainer: Jane Doe <jane@example.com>",
        "Description: Shows foo in the panel",
    ]
    assert control.endswith("\n")


def test_deb_control_is_reproducible() -> None:
    first = render_deb_control(DESCRIPTOR, name="foo", version="1.2.3", architecture="amd64")
    second = render_deb_control(
        DESCRIPTOR.model_copy(), name="foo", version="1.2.3", architecture="amd64"
    )

    assert first.encode() == second.encode()


def test_rpm_spec_header_fields() -> None:
    spec = render_rpm_spec(
        DESCRIPTOR,
        name="foo",
        version="1.2.3",
        destinations=resolve_paths(InstallRoot("/usr"), "foo", DESCRIPTOR.app_id),
    )
    lines = spec.splitlines()

    assert lines[:10] == [
        "Name: foo",
        "Version: 1.2.3",
        "Release: 1%{?dist}",
        "Summary: Shows foo in the panel",
        "",
        "License: GPLv3",
        "Group: Applications/Utilities",
        "%description",
        "Shows foo in the panel",
        "",
    ]


def test_rpm_files_section_lists_installed_paths() -> None:
    spec = render_rpm_spec(
        DESCRIPTOR,
        name="foo",
        version="1.2.3",
        destinations=resolve_paths(InstallRoot("/usr"), "foo", DESCRIPTOR.app_id),
        license="MIT",
    )
    lines = spec.splitlines()
    files = lines[lines.index("%files") + 1 :]

    assert "License: MIT" in lines
    assert files == [
        "%defattr(-,root,root,-)",
        "/usr/bin/foo",
        "/usr/share/applications/io.example.Foo.desktop",
        "/usr/share/metainfo/io.example.Foo.metainfo.xml",
        "/usr/share/icons/hicolor/scalable/apps/*.svg",
    ]


def test_rpm_files_follow_prefix() -> None:
    spec = render_rpm_spec(
        DESCRIPTOR,
        name="foo",
        version="1.2.3",
        destinations=resolve_paths(InstallRoot("/opt/foo"), "foo", DESCRIPTOR.app_id),
        icon_pattern="*.png",
    )

    assert "/opt/foo/bin/foo\n" in spec
    assert spec.endswith("/opt/foo/share/icons/hicolor/scalable/apps/*.png\n")
