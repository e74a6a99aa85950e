"""Error taxonomy for vtiles.

Every failure that aborts a batch is one of three kinds:

- ``InvalidArgument``: a command-line argument is missing or rejected.
- ``TileIOError``: an output directory or tile file cannot be written.
- ``RenderError``: the renderer, its stylesheet or a plugin fails.

Nothing below the CLI catches these; a single failure ends the run.
"""

from __future__ import annotations


class VTilesError(Exception):
    """Base class for errors that abort a tile batch."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(VTilesError, ValueError):
    """A command-line argument is missing, unparsable or out of range.

    Attributes:
        show_usage: Whether the CLI should print the usage text first
    """

    kind = "invalid_argument"

    def __init__(self, message: str, *, show_usage: bool = False) -> None:
        super().__init__(message)
        self.show_usage = show_usage


class TileIOError(VTilesError):
    """An output directory or tile file could not be created or written."""

    kind = "io_error"

    def __init__(self, message: str, path: object = None) -> None:
        super().__init__(message)
        self.path = path


class RenderError(VTilesError):
    """The renderer failed for a tile, or could not be set up."""

    kind = "render_error"
