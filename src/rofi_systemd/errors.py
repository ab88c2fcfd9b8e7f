class RofiSystemdError(Exception):
    """Base class for fatal errors; the message is shown to the user."""


class ConfigError(RofiSystemdError):
    """Raised when an environment override has an unusable value."""


class TempFileError(RofiSystemdError):
    """Raised when the per-run cache file cannot be created."""


class MenuError(RofiSystemdError):
    """Raised when the menu picker cannot be launched."""


class StaleSelectionError(RofiSystemdError):
    """Raised when the picker returns an index with no cached row behind it."""

    def __init__(self, index: object, code: int) -> None:
        self.index = index
        self.code = code
        super().__init__(f"no unit at selected index {index!r} (menu exit code {code})")
