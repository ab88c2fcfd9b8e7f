"""Format unit rows and drive the rofi picker."""

import html
import logging
import subprocess
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .config import Config
from .errors import MenuError
from .models import FIELD_SEP, STATUS_MARKERS, STEADY_STATES, TRANSITIONAL_STATES, UnitRecord


_logger = logging.getLogger(__name__)

ELLIPSIS = "…"

# rofi reports the first custom key binding (-kb-custom-1) as exit code 10
CUSTOM_CODE_BASE = 10
CANCEL_CODE = 1

STATE_COLORS = {
    "active": "#5faf5f",
    "failed": "#d75f5f",
    "error": "#d75f5f",
    "inactive": "#808080",
    "activating": "#d7af5f",
    "deactivating": "#d7af5f",
    "reloading": "#d7af5f",
}
UNKNOWN_COLOR = "#af87d7"


@dataclass(frozen=True)
class KeyBinding:
    action: str
    chord: str

    @property
    def hint(self) -> str:
        """Short chord notation, e.g. ``Alt+Shift+e`` -> ``A-E``."""
        *mods, key = self.chord.split("+")
        if "Shift" in mods:
            key = key.upper()
        return "-".join([m[0] for m in mods if m != "Shift"] + [key])


# Order matters: position N is registered as -kb-custom-(N+1), exit code 10+N
KEYBINDINGS: tuple[KeyBinding, ...] = (
    KeyBinding("enable", "Alt+e"),
    KeyBinding("enable-now", "Alt+Shift+e"),
    KeyBinding("disable", "Alt+d"),
    KeyBinding("disable-now", "Alt+Shift+d"),
    KeyBinding("stop", "Alt+k"),
    KeyBinding("start", "Alt+s"),
    KeyBinding("restart", "Alt+r"),
    KeyBinding("journal", "Alt+j"),
    KeyBinding("status", "Alt+i"),
    KeyBinding("reset-failed", "Alt+x"),
)


def help_line(bindings: Sequence[KeyBinding] = KEYBINDINGS) -> str:
    return " | ".join(f"<b>{kb.hint}</b> {kb.action}" for kb in bindings)


def plain_help(bindings: Sequence[KeyBinding] = KEYBINDINGS) -> str:
    return "\n".join(f"  {kb.chord:<14} {kb.action}" for kb in bindings)


def truncate_name(name: str, max_length: int) -> str:
    """Strip leading status glyphs and cut names longer than ``max_length``.

    A truncated name keeps ``max_length - 1`` characters plus an ellipsis.
    """
    name = name.lstrip(STATUS_MARKERS)
    if len(name) <= max_length:
        return name
    return name[: max_length - 1] + ELLIPSIS


def state_icon(state: str) -> str:
    if state in STEADY_STATES:
        return "●"
    if state in TRANSITIONAL_STATES:
        return "○"
    return "?"


def format_row(rec: UnitRecord, max_length: int) -> str:
    """One picker line: the markup shown to the user, then the raw fields.

    Only the first tab-separated column is displayed; the rest is read back
    when the row is selected.
    """
    color = STATE_COLORS.get(rec.active_state, UNKNOWN_COLOR)
    icon = f'<span color="{color}">{state_icon(rec.active_state)}</span>'
    short = truncate_name(rec.name, max_length).ljust(max_length)
    display = (
        f"{icon} {html.escape(short)} "
        f"<i>{html.escape(rec.active_state)}/{html.escape(rec.sub_state)}</i> "
        f"<small>[{rec.scope}]</small>"
    )
    return FIELD_SEP.join([display, *rec.fields()])


def format_rows(records: Iterable[UnitRecord], max_length: int) -> list[str]:
    return [format_row(r, max_length) for r in records]


def prompt_for(context: str, failed_only: bool) -> str:
    prompt = f"systemd ({context})"
    if failed_only:
        prompt += " failed"
    return prompt


def picker_argv(
    config: Config,
    prompt: str,
    message: Optional[str] = None,
    bindings: Sequence[KeyBinding] = (),
    columns: bool = False,
) -> list[str]:
    argv = [config.menu, "-dmenu", "-i", "-no-custom", "-format", "i", "-p", prompt]
    if message:
        argv.extend(["-mesg", message])
    if columns:
        argv.extend(["-markup-rows", "-display-columns", "1", "-display-column-separator", FIELD_SEP])
    for n, kb in enumerate(bindings, start=1):
        argv.extend([f"-kb-custom-{n}", kb.chord])
    return argv


def run_picker(argv: list[str], lines: Sequence[str]) -> tuple[Optional[int], int]:
    """Feed ``lines`` to the picker and return ``(index, exit_code)``.

    ``index`` is None when the picker printed nothing usable.
    """
    _logger.debug("running command %s with %d rows", argv, len(lines))
    try:
        result = subprocess.run(
            argv,
            input="".join(f"{line}\n" for line in lines),
            stdout=subprocess.PIPE,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        raise MenuError(f"menu program not found: {argv[0]}") from None
    out = (result.stdout or "").strip()
    _logger.debug("picker exited with %s, output %r", result.returncode, out)
    try:
        index: Optional[int] = int(out)
    except ValueError:
        index = None
    return index, result.returncode


def pick_unit(config: Config, rows: Sequence[str], context: str, failed_only: bool) -> tuple[Optional[int], int]:
    argv = picker_argv(
        config,
        prompt_for(context, failed_only),
        message=help_line(),
        bindings=KEYBINDINGS,
        columns=True,
    )
    return run_picker(argv, rows)
