import sys
from pathlib import Path

import pytest

from appstage.errors import ExternalToolError, IoError
from appstage.utils.subprocess import run_command, run_logged

SCRIPT = "import sys; print('building'); sys.stdout.flush(); print('oops', file=sys.stderr); sys.exit(3)"


def test_run_logged_streams_and_writes_log(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    log_file = tmp_path / "x86_64.txt"

    result = run_logged([sys.executable, "-c", SCRIPT], log_file=log_file, cwd=tmp_path)

    assert result.returncode == 3
    assert result.stdout == "building\noops\n"
    assert log_file.read_text() == "building\noops\n"
    assert capsys.readouterr().out == "building\noops\n"


def test_run_logged_missing_tool(tmp_path: Path) -> None:
    with pytest.raises(ExternalToolError):
        run_logged(["appstage-no-such-tool"], log_file=tmp_path / "log.txt")


def test_run_logged_unwritable_log(tmp_path: Path) -> None:
    log_file = tmp_path / "missing" / "log.txt"

    with pytest.raises(IoError) as excinfo:
        run_logged([sys.executable, "-c", "pass"], log_file=log_file)

    assert excinfo.value.path == log_file


def test_run_command_raises_on_failure() -> None:
    with pytest.raises(ExternalToolError) as excinfo:
        run_command([sys.executable, "-c", SCRIPT])

    assert excinfo.value.returncode == 3
    assert "oops" in str(excinfo.value)
