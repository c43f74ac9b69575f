"""Identities extracted from uploaded filenames."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Literal, Union

BOARD_CODE_PREFIX = "vocaloid-"


class Board(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def code(self) -> str:
        """Board code used by the ranking backend, e.g. ``vocaloid-weekly``."""

        return f"{BOARD_CODE_PREFIX}{self.value}"


class Part(str, Enum):
    MAIN = "main"
    NEW = "new"


@dataclass(frozen=True, slots=True)
class BoardIdentity:
    """One periodic ranking edition."""

    board: Board
    part: Part
    issue: int
    kind: Literal["board"] = field(default="board", init=False)

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "board": self.board.value,
            "part": self.part.value,
            "issue": self.issue,
        }


@dataclass(frozen=True, slots=True)
class DataIdentity:
    """One daily snapshot, keyed by its date."""

    date: date
    kind: Literal["data"] = field(default="data", init=False)

    @property
    def date_key(self) -> str:
        return self.date.isoformat()

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind, "date": self.date_key}


Identity = Union[BoardIdentity, DataIdentity]
