"""Utility functions for Dexcom Share API Client"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any

from .errors import ShareDecodeError, TimestampParseError
from .types import GlucoseReading, RawReading, TrendType

TIMESTAMP_REGEX = re.compile(r'Date\((\d*)\)', re.ASCII)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Older Share responses send the trend as its numeric code
TREND_MAP = list(TrendType)


def get_trend(trend: Any) -> str:
    """Normalize a raw trend (name or numeric code) to its string tag"""
    if isinstance(trend, bool):
        raise ShareDecodeError(f"Invalid trend: {trend!r}")
    if isinstance(trend, int):
        if 0 <= trend < len(TREND_MAP):
            return TREND_MAP[trend].value
        return TrendType.NOT_COMPUTABLE.value
    if isinstance(trend, str):
        return trend
    raise ShareDecodeError(f"Invalid trend: {trend!r}")


def convert_timestamp(wt: str) -> datetime:
    """
    Convert a `Date(<epoch millis>)` string to a UTC datetime

    Raises:
        TimestampParseError: If the wrapper or the digits are malformed
    """
    if not isinstance(wt, str):
        raise TimestampParseError(f"failed to parse timestamp: {wt!r}")
    match = TIMESTAMP_REGEX.search(wt)
    if match is None:
        raise TimestampParseError(f"failed to parse timestamp: {wt}")
    digits = match.group(1)
    try:
        millis = int(digits)
    except ValueError as e:
        raise TimestampParseError(f"invalid timestamp: {digits}") from e
    try:
        return EPOCH + timedelta(milliseconds=millis)
    except OverflowError as e:
        raise TimestampParseError(f"timestamp out of range: {digits}") from e


def map_data(raw_reading: RawReading) -> GlucoseReading:
    """Map API RawReading to GlucoseReading"""
    if isinstance(raw_reading.Value, bool) or not isinstance(raw_reading.Value, int):
        raise ShareDecodeError(f"Invalid glucose value: {raw_reading.Value!r}")
    return GlucoseReading(
        timestamp=convert_timestamp(raw_reading.WT),
        value=raw_reading.Value,
        trend=get_trend(raw_reading.Trend),
    )
