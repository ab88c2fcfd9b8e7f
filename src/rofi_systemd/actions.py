"""Turn a picker result into a unit and an action.

The flow has two states. The unit picker comes first; confirming a row with
a bound key picks that action directly, a plain confirm uses the configured
default. When the default is ``list_actions`` a second picker offers the
action set; backing out of it returns to the unit picker.
"""

import logging
from typing import Callable, Optional, Sequence

from .config import ACTIONS, LIST_ACTIONS, Config
from .errors import StaleSelectionError
from .menu import CANCEL_CODE, CUSTOM_CODE_BASE, KEYBINDINGS, picker_argv, pick_unit, run_picker
from .models import FIELD_SEP, UnitRecord


_logger = logging.getLogger(__name__)

BACK = "back"


def action_for_code(code: int, default_action: str) -> Optional[str]:
    """Map a picker exit code to an action name; None means the user cancelled."""
    if code == CANCEL_CODE:
        return None
    slot = code - CUSTOM_CODE_BASE
    if 0 <= slot < len(KEYBINDINGS):
        return KEYBINDINGS[slot].action
    return default_action


def record_at(rows: Sequence[str], index: Optional[int], code: int) -> UnitRecord:
    if index is None or not 0 <= index < len(rows):
        raise StaleSelectionError(index, code)
    try:
        return UnitRecord.from_fields(rows[index].split(FIELD_SEP))
    except ValueError:
        raise StaleSelectionError(index, code) from None


def pick_action(config: Config, rec: UnitRecord) -> Optional[str]:
    """Show the action picker for one unit; None means go back to the unit list."""
    choices = [*ACTIONS, BACK]
    argv = picker_argv(config, f"{rec.name} ({rec.scope})")
    index, code = run_picker(argv, choices)
    if code != 0:
        return None
    if index is None or not 0 <= index < len(choices):
        raise StaleSelectionError(index, code)
    choice = choices[index]
    return None if choice == BACK else choice


def select(
    config: Config,
    load_rows: Callable[[], Sequence[str]],
    context: str,
    failed_only: bool = False,
) -> Optional[tuple[UnitRecord, str]]:
    """Run the unit/action pickers until a concrete action is chosen.

    Returns None when the unit picker is cancelled or has no units.
    """
    while True:
        rows = load_rows()
        index, code = pick_unit(config, rows, context, failed_only)
        action = action_for_code(code, config.default_action)
        if action is None:
            _logger.debug("unit picker cancelled")
            return None
        if not rows:
            _logger.debug("no units listed, nothing to act on")
            return None
        rec = record_at(rows, index, code)
        if action == LIST_ACTIONS:
            action = pick_action(config, rec)
            if action is None:
                _logger.debug("action picker dismissed, back to unit list")
                continue
        _logger.debug("selected %s on %s (%s)", action, rec.name, rec.scope)
        return rec, action
