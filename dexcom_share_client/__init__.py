"""Dexcom Share API Client for Python"""

from .client import DexcomShareClient
from .errors import (
    ShareAuthenticationError,
    ShareDecodeError,
    ShareError,
    ShareSessionError,
    ShareTransportError,
    ShareVendorError,
    TimestampParseError,
)
from .types import GlucoseReading, TrendType
from .utils import convert_timestamp

__all__ = [
    'DexcomShareClient',
    'GlucoseReading',
    'TrendType',
    'convert_timestamp',
    'ShareError',
    'ShareTransportError',
    'ShareDecodeError',
    'ShareVendorError',
    'ShareAuthenticationError',
    'ShareSessionError',
    'TimestampParseError',
]
