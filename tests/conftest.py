import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from appstage.assembly.formats import deb as deb_mod
from appstage.assembly.formats import flatpak as flatpak_mod
from appstage.assembly.formats import rpm as rpm_mod
from appstage.assembly import materialize as materialize_mod
from appstage.errors import ExternalToolError

APP_ID = "io.example.Foo"

DESCRIPTOR = """<?xml version="1.0" encoding="UTF-8"?>
<component type="desktop-application">
  <id>{app_id}</id>
  <name>Foo</name>
  <summary>Shows foo in the panel</summary>
  <summary xml:lang="de">Zeigt foo an</summary>
  <developer id="io.example">
    <name>Jane Doe</name>
  </developer>
  <update_contact>{email}</update_contact>
  <provides>
    <binary>foo</binary>
  </provides>
</component>
"""


def write_descriptor(res: Path, *, email: str = "jane@example.com") -> Path:
    path = res / f"{APP_ID}.metainfo.xml"
    path.write_text(DESCRIPTOR.format(app_id=APP_ID, email=email))
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project tree shaped like a cargo application."""

    root = tmp_path / "project"
    res = root / "res"
    icons = res / "icons" / "apps"
    icons.mkdir(parents=True)

    write_descriptor(res)
    (res / f"{APP_ID}.desktop").write_text("[Desktop Entry]\nName=Foo\nExec=foo\n")
    (icons / f"{APP_ID}.svg").write_text("<svg/>")
    (icons / f"{APP_ID}-symbolic.svg").write_text("<svg/>")
    (icons / "README.txt").write_text("not an icon")

    binary = root / "target" / "release" / "foo"
    binary.parent.mkdir(parents=True)
    binary.write_bytes(b"\x7fELF fake")

    (root / "Cargo.toml").write_text(
        '[package]\nname = "foo"\nversion = "1.2.3"\nedition = "2021"\n\n'
        '[dependencies]\nserde = { version = "1" }\n'
    )
    return root


@dataclass
class FakeTools:
    commands: list[list[str]] = field(default_factory=list)
    fail: set[str] = field(default_factory=set)
    snapshots: dict[str, dict[str, str]] = field(default_factory=dict)
    rpm_arch_dir: str = "x86_64"
    control: str = ""
    spec: str = ""

    def names(self) -> list[str]:
        return [command[0] for command in self.commands]

    def __call__(self, command, *, cwd=None, check=True, **kwargs):
        command = list(command)
        self.commands.append(command)
        tool = command[0]

        if tool in self.fail:
            result = subprocess.CompletedProcess(command, 2, "", f"{tool} exploded")
            if check:
                raise ExternalToolError(
                    f"Command failed: {' '.join(command)}",
                    command=command,
                    returncode=2,
                )
            return result

        if tool == "dpkg-deb":
            staging = Path(cwd) / command[-1]
            self.snapshots["deb"] = _snapshot(staging)
            self.control = (staging / "DEBIAN" / "control").read_text()
            (Path(cwd) / f"{command[-1]}.deb").write_bytes(b"!<arch>")
        elif tool == "rpmbuild":
            buildroot = Path(command[2].split("=", 1)[1])
            self.snapshots["rpm"] = _snapshot(buildroot)
            self.spec = Path(command[3]).read_text()
            out = Path(cwd) / self.rpm_arch_dir
            out.mkdir()
            (out / "foo-1.2.3-1.fc40.x86_64.rpm").write_bytes(b"\xed\xab\xee\xdb")
        elif tool == "flatpak":
            return subprocess.CompletedProcess(command, 0, "x86_64\n", "")
        elif tool == "flatpak-builder":
            return subprocess.CompletedProcess(command, 0, "building\n", "done\n")

        return subprocess.CompletedProcess(command, 0, "", "")

    def logged(self, command, *, log_file, cwd=None):
        result = self(command, cwd=cwd, check=False)
        output = (result.stdout or "") + (result.stderr or "")
        Path(log_file).write_text(output)
        return subprocess.CompletedProcess(result.args, result.returncode, output, None)


def _snapshot(root: Path) -> dict[str, str]:
    return {
        path.relative_to(root).as_posix(): oct(path.stat().st_mode & 0o777)
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> FakeTools:
    tools = FakeTools()
    for module in (materialize_mod, deb_mod, rpm_mod, flatpak_mod):
        monkeypatch.setattr(module, "run_command", tools)
    monkeypatch.setattr(flatpak_mod, "run_logged", tools.logged)
    return tools
