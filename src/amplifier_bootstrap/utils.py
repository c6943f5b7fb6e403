"""Filesystem helpers for installing into the destination layout.

Per DRY: Deletion and copy-error classification are shared by every strategy.
"""

import errno
import logging
import shutil
import tempfile
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)

# errno values meaning "someone else has the file open or we lack access right now"
_TRANSIENT_ERRNOS = frozenset(
    code
    for code in (
        getattr(errno, "EACCES", None),
        getattr(errno, "EPERM", None),
        getattr(errno, "EBUSY", None),
        getattr(errno, "ETXTBSY", None),
        getattr(errno, "EAGAIN", None),
    )
    if code is not None
)

# ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
_TRANSIENT_WINERRORS = frozenset({32, 33})


def is_transient_copy_error(exc: BaseException) -> bool:
    """Check whether a copy failure could succeed on retry once a file is released.

    Args:
        exc: Exception raised while copying

    Returns:
        True for in-use / access-denied errors, False for everything else
    """
    if not isinstance(exc, OSError):
        return False
    if isinstance(exc, PermissionError | BlockingIOError):
        return True
    if getattr(exc, "winerror", None) in _TRANSIENT_WINERRORS:
        return True
    return exc.errno in _TRANSIENT_ERRNOS


def try_hard_to_delete(path: Path) -> bool:
    """Delete a file or directory tree, logging instead of raising.

    Args:
        path: File or directory to remove

    Returns:
        True if nothing exists at path afterwards
    """
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path, ignore_errors=True)
        else:
            path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug(f"Could not delete {path}: {e}")
    return not path.exists()


def temporary_name(stem: str) -> Path:
    """A fresh, not-yet-created path in the system temp directory."""
    return Path(tempfile.gettempdir()) / f"{stem}-{uuid.uuid4().hex}"


def version_folder(root: Path, name: str, version: str) -> Path:
    """<root>/<name>/<version>, created if absent."""
    folder = root / name / version
    folder.mkdir(parents=True, exist_ok=True)
    return folder
