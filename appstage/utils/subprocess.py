import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from appstage.errors import ExternalToolError, IoError

logger = logging.getLogger(__name__)


def run_command(
    command: List[str],
    *,
    cwd: Optional[Path] = None,
    env: Optional[dict] = None,
    check: bool = True,
    capture_output: bool = True,
    text: bool = True,
) -> subprocess.CompletedProcess:
    logger.debug("Running: %s", " ".join(command))

    try:
        result = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            env=env,
            check=False,  # handled manually
            capture_output=capture_output,
            text=text,
        )
    except FileNotFoundError as exc:
        raise ExternalToolError(
            f"Command not found: {command[0]}",
            command=command,
        ) from exc
    except OSError as exc:
        raise ExternalToolError(
            f"Failed to execute command: {' '.join(command)}",
            command=command,
        ) from exc

    if check and result.returncode != 0:
        raise ExternalToolError(
            format_error(command, result),
            command=command,
            returncode=result.returncode,
        )

    return result


def format_error(
    command: List[str],
    result: subprocess.CompletedProcess,
) -> str:
    message = [
        f"Command failed: {' '.join(command)}",
        f"Exit code: {result.returncode}",
    ]

    if result.stdout:
        message.append(f"stdout:\n{result.stdout.strip()}")

    if result.stderr:
        message.append(f"stderr:\n{result.stderr.strip()}")

    return "\n".join(message)


def run_logged(
    command: List[str],
    *,
    log_file: Path,
    cwd: Optional[Path] = None,
) -> subprocess.CompletedProcess:
    """Run ``command``, echoing its combined output live and copying it to ``log_file``.

    Works like ``command 2>&1 | tee log_file``. The exit status is returned,
    never raised; ``stdout`` of the result holds the full output.
    """

    logger.debug("Running: %s (log: %s)", " ".join(command), log_file)

    lines: List[str] = []

    try:
        log = open(log_file, "w", encoding="utf-8")
    except OSError as exc:
        raise IoError("Failed to write file", log_file) from exc

    with log:
        try:
            process = subprocess.Popen(
                command,
                cwd=str(cwd) if cwd else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except FileNotFoundError as exc:
            raise ExternalToolError(
                f"Command not found: {command[0]}",
                command=command,
            ) from exc
        except OSError as exc:
            raise ExternalToolError(
                f"Failed to execute command: {' '.join(command)}",
                command=command,
            ) from exc

        with process:
            for line in process.stdout:
                sys.stdout.write(line)
                sys.stdout.flush()
                log.write(line)
                lines.append(line)

    return subprocess.CompletedProcess(command, process.returncode, "".join(lines), None)
