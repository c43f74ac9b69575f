"""Classify uploaded filenames into board or data identities.

Accepted layouts (extension stripped first)::

    [vocaloid-]{board}-{part}-{issue}   e.g. vocaloid-weekly-main-87.csv
    {yyyy}-{MM}-{dd}                    e.g. 2024-05-01.json

Board tokens are alphabetic and date segments are numeric, so a name can
never match both layouts.
"""
from __future__ import annotations

import re
from datetime import date
from pathlib import PurePosixPath

from rankconsole.core.errors import InvalidDate, UnrecognizedFilename
from rankconsole.domain import Board, BoardIdentity, DataIdentity, Identity, Part
from rankconsole.domain.identity import BOARD_CODE_PREFIX

_BOARD_RE = re.compile(
    rf"(?:{re.escape(BOARD_CODE_PREFIX)})?"
    rf"(?P<board>{'|'.join(b.value for b in Board)})"
    rf"-(?P<part>{'|'.join(p.value for p in Part)})"
    r"-(?P<issue>[0-9]+)"
)
_DATE_RE = re.compile(r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})")


def _stem(filename: str) -> str:
    # browsers on Windows may hand over backslash separated paths
    name = PurePosixPath(filename.replace("\\", "/")).name
    if "." in name:
        name = name.rsplit(".", 1)[0]
    return name


def classify(filename: str) -> Identity:
    """Return the identity encoded in ``filename``.

    Raises :class:`UnrecognizedFilename` when neither layout matches and
    :class:`InvalidDate` when a date-shaped name is not a calendar date.
    """

    stem = _stem(filename)

    match = _DATE_RE.fullmatch(stem)
    if match:
        try:
            value = date(int(match["year"]), int(match["month"]), int(match["day"]))
        except ValueError as exc:
            raise InvalidDate(filename, stem) from exc
        return DataIdentity(date=value)

    match = _BOARD_RE.fullmatch(stem)
    if match:
        issue = int(match["issue"])
        if issue <= 0:
            raise UnrecognizedFilename(filename, f"issue must be positive: {match['issue']}")
        return BoardIdentity(board=Board(match["board"]), part=Part(match["part"]), issue=issue)

    raise UnrecognizedFilename(filename)


__all__ = ["classify"]
