"""
Leaderboard line-protocol codec.

Submissions travel as a slash-joined path segment
``name/score/seconds/text``; the leaderboard answers with one entry per
line, fields pipe-delimited as ``name|score|seconds|text|date``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Sequence

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Player"
UNKNOWN_NAME = "Unknown"

_NAME_DISALLOWED = re.compile(r"[^A-Za-z0-9]")
_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class LeaderboardEntry:
    """One ranked row of the leaderboard."""

    name: str
    score: int
    seconds: int
    text: str = ""
    date: str = ""

    @property
    def formatted_time(self) -> str:
        """Elapsed time as MM:SS."""
        minutes, secs = divmod(self.seconds, 60)
        return f"{minutes:02d}:{secs:02d}"


def sanitize_name(name: str, default: str = DEFAULT_NAME) -> str:
    """Strip everything but ASCII letters and digits; fall back to `default`."""
    return _NAME_DISALLOWED.sub("", name or "") or default


def encode_submission(
    name: str,
    score: int,
    seconds: int,
    level: int,
    default_name: str = DEFAULT_NAME,
) -> str:
    """
    Encode a score submission for the leaderboard's add endpoint.

    >>> encode_submission("Jo hn!", 80, 42, 3)
    'John/80/42/Level3'
    """
    clean_name = sanitize_name(name, default_name)
    text = f"Level{level}"
    return "/".join([clean_name, str(score), str(seconds), text])


def _field(fields: Sequence[str], index: int, default: str) -> str:
    return fields[index] if len(fields) > index else default


def _parse_int(value: str) -> int:
    """Parse a plain ASCII integer; no padding, separators or other digit sets."""
    if not _INTEGER.fullmatch(value):
        raise ValueError(f"not an integer: {value!r}")
    return int(value)


def decode(raw: str) -> List[LeaderboardEntry]:
    """
    Parse a pipe-format leaderboard body into entries, in line order.

    Lines with fewer than three fields, or whose score or seconds is not an
    integer, are skipped.
    """
    entries: List[LeaderboardEntry] = []
    if not raw or not raw.strip():
        return entries

    for line_no, line in enumerate(raw.split("\n"), start=1):
        line = line.rstrip("\r")
        if not line.strip():
            continue

        fields = line.split("|")
        if len(fields) < 3:
            logger.debug("Skipping leaderboard line %d: too few fields", line_no)
            continue

        try:
            score = _parse_int(_field(fields, 1, "0"))
            seconds = _parse_int(_field(fields, 2, "0"))
        except ValueError:
            logger.debug("Skipping leaderboard line %d: bad number in %r", line_no, line)
            continue

        entries.append(
            LeaderboardEntry(
                name=_field(fields, 0, UNKNOWN_NAME),
                score=score,
                seconds=seconds,
                text=_field(fields, 3, ""),
                date=_field(fields, 4, ""),
            )
        )

    return entries
