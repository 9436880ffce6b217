import logging
from pathlib import Path
from typing import Literal

from appstage.errors import AppstageError, StagingConflictError
from appstage.utils.fs import ensure_dir, remove_dir

logger = logging.getLogger(__name__)

StagingPolicy = Literal["fail", "replace"]


def prepare_staging(path: Path, *, policy: StagingPolicy = "fail") -> Path:
    """Create a fresh staging directory at ``path``.

    A directory left behind by an earlier build is a conflict under the
    ``"fail"`` policy and is wiped under ``"replace"``.
    """

    if path.exists():
        if policy != "replace":
            raise StagingConflictError(path)

        logger.warning("Removing stale staging directory %s", path)
        remove_dir(path)

    ensure_dir(path)
    return path


def cleanup_staging(path: Path) -> None:
    try:
        remove_dir(path)
    except AppstageError as exc:
        logger.warning("Failed to clean up staging directory: %s", exc)
