from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


Scope = Literal["user", "system"]
Context = Literal["user", "system", "all"]

ACTIVE_STATES: tuple[str, ...] = (
    "active",
    "activating",
    "reloading",
    "inactive",
    "deactivating",
    "failed",
    "error",
    "unknown",
)

STEADY_STATES = frozenset({"active", "inactive", "failed", "error"})
TRANSITIONAL_STATES = frozenset({"activating", "reloading", "deactivating"})

FIELD_SEP = "\t"

# Glyphs systemctl may print in front of a unit name
STATUS_MARKERS = "●×*○↻ "


def normalize_state(state: str) -> str:
    s = state.strip().lower()
    return s if s in ACTIVE_STATES else "unknown"


@dataclass(slots=True, frozen=True)
class UnitRecord:
    name: str
    active_state: str
    sub_state: str
    scope: Scope

    @property
    def is_user(self) -> bool:
        return self.scope == "user"

    def fields(self) -> list[str]:
        return [self.name, self.active_state, self.sub_state, self.scope]

    @classmethod
    def from_fields(cls, fields: list[str]) -> "UnitRecord":
        """Rebuild a record from the trailing columns of a serialized row."""
        name, active, sub, scope = fields[-4:]
        if scope not in ("user", "system"):
            raise ValueError(f"invalid scope in row: {scope!r}")
        return cls(name=name, active_state=normalize_state(active), sub_state=sub, scope=scope)  # type: ignore[arg-type]


@dataclass(slots=True, frozen=True)
class ActionRequest:
    action: str
    unit: str
    scope: Scope
    needs_elevation: bool
    wants_terminal: bool
