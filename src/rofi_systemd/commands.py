"""Build the final command line for an action and hand it to the OS."""

import logging
import os
import shlex
import subprocess
import sys

from .config import Config
from .errors import RofiSystemdError
from .models import ActionRequest, UnitRecord


_logger = logging.getLogger(__name__)

TERMINAL_ACTIONS = frozenset({"status", "journal"})
# Reading a unit's journal does not need privileges the invoking user lacks
UNELEVATED_ACTIONS = frozenset({"journal"})

JOURNAL_LINES = 1000
NOW_SUFFIX = "-now"


def build_request(action: str, rec: UnitRecord) -> ActionRequest:
    return ActionRequest(
        action=action,
        unit=rec.name,
        scope=rec.scope,
        needs_elevation=not rec.is_user and action not in UNELEVATED_ACTIONS,
        wants_terminal=action in TERMINAL_ACTIONS,
    )


def split_now(action: str) -> tuple[str, bool]:
    """``enable-now`` -> (``enable``, True); other actions pass through."""
    if action.endswith(NOW_SUFFIX):
        return action[: -len(NOW_SUFFIX)], True
    return action, False


def _elevation(req: ActionRequest, config: Config) -> list[str]:
    return list(config.sudo) if req.needs_elevation else []


def systemctl_argv(req: ActionRequest, config: Config) -> list[str]:
    verb, now = split_now(req.action)
    argv = [*_elevation(req, config), "systemctl"]
    if now:
        argv.append("--now")
    argv.append(verb)
    if req.scope == "user":
        argv.append("--user")
    argv.append(req.unit)
    return argv


def _title(unit: str) -> str:
    return f"printf '\\033]0;%s\\007' {shlex.quote(unit)}"


def status_script(req: ActionRequest, config: Config) -> str:
    status = [*_elevation(req, config), "env", "SYSTEMD_COLORS=1", "systemctl", "--no-pager", "status"]
    if req.scope == "user":
        status.append("--user")
    status.append(req.unit)
    # systemctl status exits non-zero for inactive units; still show what it printed
    return (
        f"{_title(req.unit)}; "
        f'{{ {shlex.join(status)} || echo "systemctl status exited with code $?"; }} 2>&1 | less -R'
    )


def journal_script(req: ActionRequest, config: Config) -> str:
    unit_flag = "--user-unit" if req.scope == "user" else "-u"
    journal = [*_elevation(req, config), "journalctl", "-n", str(JOURNAL_LINES), "-f", unit_flag, req.unit]
    return f"{_title(req.unit)}; echo {shlex.quote(req.unit)}; {shlex.join(journal)}"


def build_command(req: ActionRequest, config: Config) -> list[str]:
    if not req.wants_terminal:
        return systemctl_argv(req, config)
    if req.action == "journal":
        script = journal_script(req, config)
    else:
        script = status_script(req, config)
    return [*config.terminal, "sh", "-c", script]


def dispatch(argv: list[str], strategy: str = "exec") -> int:
    """Run the final command.

    ``exec`` replaces this process and does not return on success; ``spawn``
    waits for the child and returns its exit code.
    """
    _logger.debug("dispatching %s via %s", argv, strategy)
    try:
        if strategy == "spawn":
            return subprocess.run(argv, check=False).returncode
        sys.stdout.flush()
        sys.stderr.flush()
        os.execvp(argv[0], argv)
    except FileNotFoundError:
        raise RofiSystemdError(f"command not found: {argv[0]}") from None
