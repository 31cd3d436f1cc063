"""Game payload validation driven by a declarative rule table.

Each field of a game record has one :class:`FieldRule`. ``validate_game``
walks the table and accumulates every violation as a human-readable
message; it never raises and never touches the store. The same table holds
the per-field defaults applied when a record is created.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

# Range of an SQLite INTEGER column
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1

STRING = "string"
LIST = "list"
NUMBER = "number"
BOOLEAN = "boolean"

_TYPE_DESCRIPTIONS = {
    STRING: "une chaîne",
    LIST: "un tableau",
    NUMBER: "un nombre",
    BOOLEAN: "boolean",
}


def current_year() -> int:
    return date.today().year


def _none_if_empty(value: Any) -> Any:
    return value or None


@dataclass(frozen=True)
class FieldRule:
    type: str
    required: bool = False
    minimum: float | None = None
    # A callable bound is evaluated on every validation
    maximum: float | Callable[[], float] | None = None
    min_items: int | None = None
    min_length: int | None = None
    default: Any = None
    # Applied to a supplied value at create time
    coerce: Callable[[Any], Any] | None = None

    def upper_bound(self) -> float | None:
        if callable(self.maximum):
            return self.maximum()
        return self.maximum

    def initial_value(self, payload: dict, key: str) -> Any:
        """Value stored for this field when a record is created from *payload*."""
        value = payload.get(key)
        if value is None:
            return self.default
        if self.coerce is not None:
            return self.coerce(value)
        return value


GAME_RULES: dict[str, FieldRule] = {
    "titre": FieldRule(STRING, required=True, min_length=1),
    "genre": FieldRule(LIST, required=True, min_items=1),
    "plateforme": FieldRule(LIST, required=True, min_items=1),
    "editeur": FieldRule(STRING, coerce=_none_if_empty),
    "developpeur": FieldRule(STRING, coerce=_none_if_empty),
    "annee_sortie": FieldRule(NUMBER, minimum=1970, maximum=current_year),
    "temps_jeu_heures": FieldRule(NUMBER, minimum=0, default=0),
    "termine": FieldRule(BOOLEAN, default=False, coerce=bool),
    "favorite": FieldRule(BOOLEAN, default=False, coerce=bool),
}

# Fields an update may write; anything else in a payload is dropped
UPDATABLE_FIELDS = tuple(GAME_RULES)


def _is_number(value: Any) -> bool:
    """JSON numbers only: bools, NaN and the infinities are rejected."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


_TYPE_CHECKS: dict[str, Callable[[Any], bool]] = {
    STRING: lambda v: isinstance(v, str),
    LIST: lambda v: isinstance(v, list),
    NUMBER: _is_number,
    BOOLEAN: lambda v: isinstance(v, bool),
}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, list) and len(value) == 0:
        return True
    return False


def _format_bound(bound: float) -> str:
    if isinstance(bound, float) and bound.is_integer():
        return str(int(bound))
    return str(bound)


def _check_field(key: str, rule: FieldRule, value: Any, is_update: bool) -> list[str]:
    if not is_update and rule.required and _is_missing(value):
        return [f"{key} requis"]
    if value is None:
        return []

    errors = []
    if not _TYPE_CHECKS[rule.type](value):
        errors.append(f"{key} doit être {_TYPE_DESCRIPTIONS[rule.type]}")

    if _is_number(value):
        lower, upper = rule.minimum, rule.upper_bound()
        if isinstance(value, int):
            lower = SQLITE_INT_MIN if lower is None else max(lower, SQLITE_INT_MIN)
            upper = SQLITE_INT_MAX if upper is None else min(upper, SQLITE_INT_MAX)
        if lower is not None and value < lower:
            errors.append(f"{key} doit être >= {_format_bound(lower)}")
        if upper is not None and value > upper:
            errors.append(f"{key} doit être <= {_format_bound(upper)}")
    if rule.min_items is not None and isinstance(value, list) and len(value) < rule.min_items:
        errors.append(f"{key} doit contenir au moins {rule.min_items} élément(s)")
    if rule.min_length is not None and isinstance(value, str) and len(value) < rule.min_length:
        errors.append(f"{key} trop court")
    return errors


def validate_game(payload: dict, is_update: bool = False) -> list[str]:
    """Check *payload* against the game rules and return every violation.

    In update mode the presence of required fields is not enforced, but
    type and bound checks still apply to every field that is present and
    not null. Keys outside the rule table are ignored.
    """
    errors: list[str] = []
    for key, rule in GAME_RULES.items():
        errors.extend(_check_field(key, rule, payload.get(key), is_update))
    return errors


def build_record(payload: dict) -> dict:
    """Return the stored field values for a new record built from a valid *payload*."""
    return {key: rule.initial_value(payload, key) for key, rule in GAME_RULES.items()}
