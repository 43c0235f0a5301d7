"""Type definitions for Dexcom Share API Client"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .errors import ShareDecodeError

MMOL_L_CONVERSION_FACTOR = 0.0555


class TrendType(str, Enum):
    """Glucose trend direction"""
    NONE = 'None'
    DOUBLE_UP = 'DoubleUp'
    SINGLE_UP = 'SingleUp'
    FORTY_FIVE_UP = 'FortyFiveUp'
    FLAT = 'Flat'
    FORTY_FIVE_DOWN = 'FortyFiveDown'
    SINGLE_DOWN = 'SingleDown'
    DOUBLE_DOWN = 'DoubleDown'
    NOT_COMPUTABLE = 'NotComputable'
    RATE_OUT_OF_RANGE = 'RateOutOfRange'


TREND_ARROWS = {
    TrendType.NONE: '',
    TrendType.DOUBLE_UP: '↑↑',
    TrendType.SINGLE_UP: '↑',
    TrendType.FORTY_FIVE_UP: '↗',
    TrendType.FLAT: '→',
    TrendType.FORTY_FIVE_DOWN: '↘',
    TrendType.SINGLE_DOWN: '↓',
    TrendType.DOUBLE_DOWN: '↓↓',
    TrendType.NOT_COMPUTABLE: '?',
    TrendType.RATE_OUT_OF_RANGE: '-',
}


@dataclass
class GlucoseReading:
    """Glucose reading returned to callers"""
    timestamp: datetime
    value: int
    trend: str

    @property
    def trend_type(self) -> Optional[TrendType]:
        try:
            return TrendType(self.trend)
        except ValueError:
            return None

    @property
    def trend_arrow(self) -> str:
        trend_type = self.trend_type
        if trend_type is None:
            return '?'
        return TREND_ARROWS[trend_type]

    @property
    def mmol_l(self) -> float:
        return round(self.value * MMOL_L_CONVERSION_FACTOR, 1)

    def __str__(self) -> str:
        return f"{self.value} mg/dL ({self.trend}) - {self.timestamp.strftime('%Y-%m-%d %H:%M:%S')}"


@dataclass
class RawReading:
    """Raw glucose record from the Share API"""
    WT: str
    Trend: Any
    Value: int

    @classmethod
    def from_dict(cls, item: Dict[str, Any]) -> 'RawReading':
        if not isinstance(item, dict):
            raise ShareDecodeError(f"Expected a reading object, got: {item!r}")
        try:
            return cls(WT=item['WT'], Trend=item['Trend'], Value=item['Value'])
        except KeyError as e:
            raise ShareDecodeError(f"Reading is missing field {e}: {item!r}") from e
