"""Metric Values — single normalization point for free-text business numbers.

Grammar:
    value   := any text
    number  := the concatenation of every ASCII digit in value, read as base-10 int
    failure := 0 (no digits, None, non-string input)

Examples:
    "320%"            -> 320
    "+50%"            -> 50
    "$120K annually"  -> 120
    "8.5min"          -> 85   (the decimal point is not a digit)
    "n/a"             -> 0

Invariants:
    - parse_metric_number never raises and never returns None
"""

import re

_NON_DIGITS = re.compile(r"[^0-9]")


def parse_metric_number(value: object) -> int:
    if not isinstance(value, str):
        return 0
    digits = _NON_DIGITS.sub("", value)
    if not digits:
        return 0
    return int(digits)
