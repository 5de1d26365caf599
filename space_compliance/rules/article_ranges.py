"""
Article range parsing.

Module definitions cite the articles they cover as human-authored strings
such as ``"Art. 6–16, 32–39, 105–108"``. This module turns them into
inclusive integer intervals. Malformed segments never raise: they are
dropped from the result and, when a warnings list is passed in, recorded
as ``RangeParseWarning`` so catalog linting can report them. A segment with
text around its number (``"Annex II 3b"``) still yields that number but is
reported as well.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

_PREFIX = re.compile(r"Art\.\s*")
_SPAN = re.compile(r"(\d+)\s*[–-]\s*(\d+)")
_SINGLE = re.compile(r"(\d+)")
_NUMERIC_SEGMENT = re.compile(r"\d+(\s*[–-]\s*\d+)?")
_LEADING_NUMBER = re.compile(r"^\s*(?:Art\.\s*)?(\d+)")


class RangeParseWarning(NamedTuple):
    text: str
    segment: str
    reason: str


def parse_ranges(
    text: str, warnings: Optional[list[RangeParseWarning]] = None
) -> list[tuple[int, int]]:
    """Parse a comma-separated range string into ``(start, end)`` intervals."""
    ranges: list[tuple[int, int]] = []
    cleaned = _PREFIX.sub("", text or "")

    for segment in (part.strip() for part in cleaned.split(",")):
        if warnings is not None and _SINGLE.search(segment) and not _NUMERIC_SEGMENT.fullmatch(segment):
            warnings.append(RangeParseWarning(text, segment, "unexpected text"))

        span = _SPAN.search(segment)
        if span:
            start, end = int(span.group(1)), int(span.group(2))
            if start > end:
                if warnings is not None:
                    warnings.append(RangeParseWarning(text, segment, "reversed interval"))
                continue
            ranges.append((start, end))
            continue

        single = _SINGLE.search(segment)
        if single:
            number = int(single.group(1))
            ranges.append((number, number))
        elif warnings is not None:
            warnings.append(RangeParseWarning(text, segment, "no article number"))

    return ranges


def is_in_ranges(number: int, ranges: list[tuple[int, int]]) -> bool:
    return any(start <= number <= end for start, end in ranges)


def article_number_of(reference: str) -> int:
    """Leading article number of a reference like ``"Art. 67(c)"`` (0 if none)."""
    match = _LEADING_NUMBER.match(reference or "")
    return int(match.group(1)) if match else 0
