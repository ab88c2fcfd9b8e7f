from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]

try:
    __version__ = version("rofi-systemd")
except PackageNotFoundError:
    # not installed, e.g. running tests straight from src/
    __version__ = "0.0.0+dev"
