"""Output layout helpers: ``<root>/<zoom>/<x>/<y>.<ext>``."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from vtiles.core.errors import TileIOError

logger = logging.getLogger(__name__)


def zoom_x_directory(root: Path, zoom: int, x: int) -> Path:
    """Path of the directory holding the tiles of column ``x`` at ``zoom``."""
    return Path(root) / str(zoom) / str(x)


def tile_path(root: Path, zoom: int, x: int, y: int, extension: str) -> Path:
    """Path of the file for tile (zoom, x, y)."""
    return zoom_x_directory(root, zoom, x) / f"{y}.{extension}"


def ensure_zoom_x_directory(root: Path, zoom: int, x: int) -> tuple[Path, bool]:
    """Create ``root/zoom/x/`` and any missing parents.

    Calling this again for the same directory is not an error, and neither
    is another process creating it first.

    Returns:
        Tuple of (directory path, whether this call created it). The flag is
        informational only.

    Raises:
        TileIOError: If the directory cannot be created
    """
    directory = zoom_x_directory(root, zoom, x)
    existed = directory.is_dir()
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise TileIOError(
            f"Error while creating the directory: '{directory}': {e}", path=directory
        ) from e
    return directory, not existed


def _new_file_mode() -> int:
    """Mode a plain ``open(path, "w")`` would give a new file (0666 & ~umask)."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_tile_file(path: Path, data: bytes) -> None:
    """Atomically write tile bytes to ``path``.

    Writes to a temp file in the same directory, then replaces the target,
    so a reader never sees a partially written tile. The temp file is
    private while it is written; the finished tile gets the usual mode for
    new files under the current umask.

    Raises:
        TileIOError: If the file cannot be opened or written
    """
    path = Path(path)
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent, suffix=".tmp", prefix=f".{path.stem}"
        )
    except OSError as e:
        raise TileIOError(
            f"Error while opening the file: '{path}': {e}", path=path
        ) from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_path, _new_file_mode())
        os.replace(tmp_path, path)
    except BaseException as e:
        try:
            os.unlink(tmp_path)
        except OSError:
            logger.debug("Could not remove temp file %s", tmp_path)
        if isinstance(e, OSError):
            raise TileIOError(
                f"Error while writing the file: '{path}': {e}", path=path
            ) from e
        raise
