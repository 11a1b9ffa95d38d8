import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from procwatch.util.log_config import setup_logger

logger = setup_logger(__name__)


def resolve_output_dir(output_dir: Optional[Path] = None) -> Path:
    """
    Resolve (and create) the directory export files are written to.

    Args:
        output_dir: Requested directory, or None for the system temp directory

    Returns:
        Absolute path to an existing directory

    Raises:
        NotADirectoryError: If the path exists but is not a directory
    """
    path = Path(output_dir) if output_dir else Path(tempfile.gettempdir())
    path = path.expanduser().resolve()

    if path.exists() and not path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {path}")

    path.mkdir(parents=True, exist_ok=True)
    return path


def create_unique_file(directory: Path, prefix: str, suffix: str) -> Path:
    """
    Atomically create a new empty file with a unique name.

    Every call yields a distinct path, so two exports never share a file.
    """
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=str(directory))
    os.close(fd)
    return Path(name)


def delete_file(dst: Path) -> None:
    """
    Delete an existing file or directory, logging (not raising) on failure.
    """
    if dst.exists() or dst.is_symlink():
        try:
            if dst.is_file() or dst.is_symlink():
                dst.unlink()
            elif dst.is_dir():
                shutil.rmtree(dst)
            logger.debug(f"Deleted: {dst}")
        except OSError as e:
            logger.error(f"Failed to delete {dst}: {e}")
