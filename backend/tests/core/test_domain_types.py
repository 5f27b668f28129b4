"""Domain Types — verifies closed vocabularies and date-token constants.

Tests:
    - ErrorCode is the full 8-member validation taxonomy
    - Enums serialize to their wire strings
    - Month abbreviations line up with calendar months
"""

import re

from portfolio.core.domain_types import (
    MONTH_ABBREVIATIONS, MONTH_TOKEN_PATTERN, ONGOING,
    ErrorCode, ExportFormat, ProjectCategory, SortDirection,
)


def test_error_code_has_eight_members():
    assert len(ErrorCode) == 8
    assert ErrorCode.DUPLICATE_ID.value == "DUPLICATE_ID"


def test_enums_are_strings():
    assert ProjectCategory.AI == "ai"
    assert SortDirection("desc") is SortDirection.DESC
    assert {f.value for f in ExportFormat} == {"json", "csv", "xml"}


def test_month_abbreviations_follow_calendar():
    assert len(MONTH_ABBREVIATIONS) == 12
    assert MONTH_ABBREVIATIONS[0] == "Jan"
    assert MONTH_ABBREVIATIONS[11] == "Dec"


def test_month_token_pattern():
    assert re.match(MONTH_TOKEN_PATTERN, "Sep 2023")
    assert not re.match(MONTH_TOKEN_PATTERN, "Sept 2023")
    assert not re.match(MONTH_TOKEN_PATTERN, ONGOING)
