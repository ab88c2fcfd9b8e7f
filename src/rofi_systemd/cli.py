import signal
from enum import Enum
from typing import Optional

import typer

from . import __version__
from .actions import select
from .cache import CacheStore
from .commands import build_command, build_request, dispatch
from .config import LIST_ACTIONS, PROG, Config
from .errors import RofiSystemdError
from .menu import format_rows, plain_help
from .models import Scope
from .systemctl import collect


class UnitContext(str, Enum):
    user = "user"
    system = "system"
    all = "all"


SCOPES: dict[str, tuple[Scope, ...]] = {
    "user": ("user",),
    "system": ("system",),
    "all": ("user", "system"),
}

EPILOG = (
    "\b\nKey bindings:\n"
    + plain_help()
    + "\n\n\b\nEnvironment:\n"
    "  ROFI_SYSTEMD_TERM              terminal launcher (default: $TERMINAL -e, else urxvt -e)\n"
    "  ROFI_SYSTEMD_EXEC              exec | spawn (default: exec)\n"
    f"  ROFI_SYSTEMD_DEFAULT_ACTION    action for plain Enter (default: {LIST_ACTIONS})\n"
    "  ROFI_SYSTEMD_MAX_NAME_LENGTH   unit name display width (default: 42)\n"
    "  ROFI_SYSTEMD_ROFI              menu program (default: rofi)\n"
    "  ROFI_SYSTEMD_SUDO              elevation wrapper (default: pkexec)\n"
    "  ROFI_SYSTEMD_DEBUG             log debug output to stderr"
)


app = typer.Typer(
    name=PROG,
    add_completion=False,
    rich_markup_mode=None,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version(value: Optional[bool]) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _exit_on_signal(signum, frame):
    # SystemExit unwinds through the cache context manager
    raise SystemExit(128 + signum)


def _install_signal_handlers() -> None:
    for sig in (signal.SIGTERM, signal.SIGHUP):
        signal.signal(sig, _exit_on_signal)


def run(context: str, failed_only: bool, use_cache: bool, config: Config) -> int:
    """Pick a unit and an action, then launch the resulting command."""
    scopes = SCOPES[context]

    with CacheStore.create(enabled=use_cache) as cache:

        def load_rows() -> list[str]:
            rows = cache.load()
            if rows is None:
                rows = format_rows(collect(scopes, failed_only), config.max_name_length)
                cache.store(rows)
            return rows

        picked = select(config, load_rows, context, failed_only)

    if picked is None:
        return 0
    rec, action = picked
    argv = build_command(build_request(action, rec), config)
    return dispatch(argv, config.exec_strategy)


@app.command(epilog=EPILOG)
def main(
    context: UnitContext = typer.Argument(UnitContext.all, help="Which units to list: user, system or all"),
    failed: bool = typer.Option(False, "-f", "--failed", help="Only show failed units"),
    no_cache: bool = typer.Option(False, "-C", "--no-cache", help="Disable caching of the unit list"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=_version,
        is_eager=True,
    ),
):
    """Browse and control systemd units from rofi."""
    _install_signal_handlers()
    try:
        config = Config.from_env()
        code = run(context.value, failed, not no_cache, config)
    except RofiSystemdError as e:
        typer.echo(f"{PROG}: {e}", err=True)
        raise typer.Exit(code=1)
    if code:
        raise typer.Exit(code=code)
