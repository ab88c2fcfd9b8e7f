import logging
import os
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import Optional, Sequence

from .errors import TempFileError


_logger = logging.getLogger(__name__)


class CacheStore:
    """Formatted picker rows for one run, kept in a private temp file.

    The file is created up front and removed by :meth:`clear`, which the
    context manager calls on every exit path.
    """

    def __init__(self, path: Path, enabled: bool = True) -> None:
        self.path = path
        self.enabled = enabled

    @classmethod
    def create(cls, enabled: bool = True, directory: Optional[str] = None) -> "CacheStore":
        try:
            fd, name = tempfile.mkstemp(prefix="rofi-systemd-", suffix=".cache", dir=directory)
        except OSError as e:
            raise TempFileError(f"cannot create cache file: {e}") from None
        os.close(fd)
        _logger.debug("cache file %s (enabled=%s)", name, enabled)
        return cls(Path(name), enabled=enabled)

    def load(self) -> Optional[list[str]]:
        if not self.enabled:
            return None
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        rows = text.splitlines()
        return rows or None

    def store(self, rows: Sequence[str]) -> None:
        self.path.write_text("".join(f"{r}\n" for r in rows), encoding="utf-8")

    def clear(self) -> None:
        with suppress(FileNotFoundError):
            self.path.unlink()
            _logger.debug("removed cache file %s", self.path)

    def __enter__(self) -> "CacheStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.clear()
