from pathlib import Path
from typing import Optional, Sequence


class AppstageError(Exception):
    exit_code: int = 1

    def __init__(self, message: str):
        super().__init__(message)

class ConfigError(AppstageError):
    exit_code = 2


class DescriptorError(AppstageError):
    exit_code = 3


class MissingDescriptorError(DescriptorError):
    exit_code = 3


class MissingFieldError(DescriptorError):
    exit_code = 4

    def __init__(self, field_name: str, source: Optional[Path] = None):
        self.field_name = field_name
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Required descriptor field is empty or missing: {field_name}{where}")

class IoError(AppstageError):
    exit_code = 12

    def __init__(self, message: str, path: Path):
        self.path = path
        super().__init__(f"{message}: {path}")


class ExternalToolError(AppstageError):
    exit_code = 13

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: Optional[int] = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        super().__init__(message)

class BuildError(AppstageError):
    exit_code = 20


class StagingConflictError(BuildError):
    exit_code = 21

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"Staging directory already exists: {path} "
            "(remove it or pass --replace-stale)"
        )
