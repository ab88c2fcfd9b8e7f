"""List units from systemctl for one manager scope.

Each scope is queried twice: once for units the manager currently knows about
and once for installed unit files. Both are merged into :class:`UnitRecord`
rows; a query that fails contributes nothing instead of aborting the listing.
"""

import logging
import subprocess
from typing import Iterable, Optional

from .models import STATUS_MARKERS, Scope, UnitRecord, normalize_state


_logger = logging.getLogger(__name__)

# Display order of the state-major sort
STATE_ORDER: tuple[str, ...] = (
    "failed",
    "error",
    "activating",
    "deactivating",
    "reloading",
    "active",
    "inactive",
    "unknown",
)


def _systemctl(*args: str, user: bool = False) -> Optional[str]:
    """Run a read-only systemctl query and return its stdout, or None on failure."""
    cmd = ["systemctl"]
    if user:
        cmd.append("--user")
    cmd.extend(args)
    _logger.debug("running command %s", cmd)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError:
        _logger.debug("systemctl not found, treating %s as empty", cmd)
        return None
    _logger.debug(
        "command '%s' completed with:\nexit code: %s\nstderr: %s",
        " ".join(cmd),
        result.returncode,
        result.stderr,
    )
    if result.returncode != 0:
        return None
    return result.stdout


def _unit_column(line: str) -> list[str]:
    return line.lstrip(STATUS_MARKERS).split()


def parse_list_units(output: str, scope: Scope) -> list[UnitRecord]:
    """Parse ``list-units --plain --no-legend`` rows (UNIT LOAD ACTIVE SUB DESCRIPTION)."""
    records = []
    for line in output.splitlines():
        cols = _unit_column(line)
        if len(cols) < 4:
            continue
        name, _load, active, sub = cols[:4]
        records.append(UnitRecord(name=name, active_state=normalize_state(active), sub_state=sub, scope=scope))
    return records


def parse_list_unit_files(output: str, scope: Scope) -> list[UnitRecord]:
    """Parse ``list-unit-files --no-legend`` rows (UNIT FILE STATE [PRESET]).

    Unit files carry no runtime state, so every row is reported inactive with
    the file state as its sub-state.
    """
    records = []
    for line in output.splitlines():
        cols = _unit_column(line)
        if len(cols) < 2:
            continue
        records.append(UnitRecord(name=cols[0], active_state="inactive", sub_state=cols[1], scope=scope))
    return records


def list_live_units(scope: Scope, failed_only: bool = False) -> list[UnitRecord]:
    args = ["list-units", "--all", "--plain", "--no-legend", "--no-pager"]
    if failed_only:
        args.append("--state=failed")
    out = _systemctl(*args, user=scope == "user")
    return parse_list_units(out, scope) if out else []


def list_unit_files(scope: Scope) -> list[UnitRecord]:
    out = _systemctl("list-unit-files", "--no-legend", "--no-pager", user=scope == "user")
    return parse_list_unit_files(out, scope) if out else []


def merge_records(live: Iterable[UnitRecord], files: Iterable[UnitRecord]) -> list[UnitRecord]:
    """Concatenate live and file-only rows, keeping the first row per (name, scope)."""
    seen: set[tuple[str, str]] = set()
    merged = []
    for rec in [*live, *files]:
        key = (rec.name, rec.scope)
        if key in seen:
            continue
        seen.add(key)
        merged.append(rec)
    return merged


def list_units(scope: Scope, failed_only: bool = False) -> list[UnitRecord]:
    """All units for one scope.

    With ``failed_only`` the live query is filtered, but unit-file rows are
    still included since a file alone has no failure state.
    """
    return merge_records(list_live_units(scope, failed_only), list_unit_files(scope))


def _state_rank(rec: UnitRecord) -> int:
    try:
        return STATE_ORDER.index(rec.active_state)
    except ValueError:
        return len(STATE_ORDER)


def sort_records(records: Iterable[UnitRecord]) -> list[UnitRecord]:
    """Name-major dedup pass, then a stable state-major display pass.

    Ties within one state keep the name order from the first pass.
    """
    by_name = merge_records(sorted(records, key=lambda r: r.name), [])
    return sorted(by_name, key=_state_rank)


def collect(scopes: Iterable[Scope], failed_only: bool = False) -> list[UnitRecord]:
    records: list[UnitRecord] = []
    for scope in scopes:
        records.extend(list_units(scope, failed_only))
    return sort_records(records)
