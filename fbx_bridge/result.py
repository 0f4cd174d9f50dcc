"""Tagged outcomes returned across the public boundary."""

from __future__ import annotations

from typing import Any, NamedTuple

OK = "ok"
ERROR = "error"


class Outcome(NamedTuple):
    """``("ok", value)`` or ``("error", reason)``; unpacks like a plain pair."""

    status: str
    value: Any

    @property
    def is_ok(self) -> bool:
        return self.status == OK


def ok(value: Any) -> Outcome:
    return Outcome(OK, value)


def error(reason: str) -> Outcome:
    return Outcome(ERROR, str(reason))
