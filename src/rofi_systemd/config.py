import os
import shlex
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .errors import ConfigError


PROG = "rofi-systemd"

ACTIONS: tuple[str, ...] = (
    "enable",
    "enable-now",
    "disable",
    "disable-now",
    "stop",
    "start",
    "restart",
    "journal",
    "status",
    "reset-failed",
)
LIST_ACTIONS = "list_actions"

EXEC_STRATEGIES = ("exec", "spawn")

DEFAULT_TERMINAL = "urxvt -e"
DEFAULT_MAX_NAME_LENGTH = 42

_TRUTHY = ("1", "true", "yes", "on")


def debug_enabled(env: Mapping[str, str]) -> bool:
    return env.get("ROFI_SYSTEMD_DEBUG", "0").strip().lower() in _TRUTHY


def _terminal_from_env(env: Mapping[str, str]) -> list[str]:
    # ROFI_SYSTEMD_TERM, then $TERMINAL -e, then the built-in default
    override = env.get("ROFI_SYSTEMD_TERM", "").strip()
    if override:
        return shlex.split(override)
    generic = env.get("TERMINAL", "").strip()
    if generic:
        return [*shlex.split(generic), "-e"]
    return shlex.split(DEFAULT_TERMINAL)


@dataclass(frozen=True)
class Config:
    """Runtime configuration, built once per run and passed to each component.

    :param terminal: Terminal launcher argv; the command to show is appended.
    :param exec_strategy: ``exec`` replaces this process, ``spawn`` waits for the child.
    :param default_action: Action used when the row was confirmed without a bound key.
    :param max_name_length: Display width for unit names before truncation.
    :param menu: Picker executable.
    :param sudo: Elevation wrapper argv.
    """

    terminal: list[str] = field(default_factory=lambda: shlex.split(DEFAULT_TERMINAL))
    exec_strategy: str = "exec"
    default_action: str = LIST_ACTIONS
    max_name_length: int = DEFAULT_MAX_NAME_LENGTH
    menu: str = "rofi"
    sudo: list[str] = field(default_factory=lambda: ["pkexec"])

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Config":
        if env is None:
            env = os.environ

        exec_strategy = env.get("ROFI_SYSTEMD_EXEC", "exec").strip().lower() or "exec"
        if exec_strategy not in EXEC_STRATEGIES:
            raise ConfigError(
                f"ROFI_SYSTEMD_EXEC must be one of {', '.join(EXEC_STRATEGIES)}, got {exec_strategy!r}"
            )

        default_action = env.get("ROFI_SYSTEMD_DEFAULT_ACTION", LIST_ACTIONS).strip() or LIST_ACTIONS
        if default_action != LIST_ACTIONS and default_action not in ACTIONS:
            raise ConfigError(f"ROFI_SYSTEMD_DEFAULT_ACTION: unknown action {default_action!r}")

        raw_len = env.get("ROFI_SYSTEMD_MAX_NAME_LENGTH", "").strip()
        max_len = DEFAULT_MAX_NAME_LENGTH
        if raw_len:
            try:
                max_len = int(raw_len)
            except ValueError:
                raise ConfigError(f"ROFI_SYSTEMD_MAX_NAME_LENGTH must be an integer, got {raw_len!r}") from None
            if max_len < 1:
                raise ConfigError(f"ROFI_SYSTEMD_MAX_NAME_LENGTH must be positive, got {max_len}")

        sudo = shlex.split(env.get("ROFI_SYSTEMD_SUDO", "pkexec").strip() or "pkexec")

        return cls(
            terminal=_terminal_from_env(env),
            exec_strategy=exec_strategy,
            default_action=default_action,
            max_name_length=max_len,
            menu=env.get("ROFI_SYSTEMD_ROFI", "rofi").strip() or "rofi",
            sudo=sudo,
        )
