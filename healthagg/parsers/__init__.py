"""Per-metric parsers and the registry that routes rows to them."""

from .base import BaseMetricParser, ParserRegistry
from .body import (
    BodyFatPercentageParser,
    BodyMassIndexParser,
    BodyMassParser,
    BodyMetricParser,
    LeanBodyMassParser,
)
from .heart_rate import HeartRateParser
from .sleep import SleepAnalysisParser
from .steps import StepCountParser


def default_registry() -> ParserRegistry:
    """
    Registry with every built-in parser.

    The order below is the merge order and must stay fixed so that the
    merged output is deterministic.
    """
    return ParserRegistry([
        StepCountParser(),
        SleepAnalysisParser(),
        BodyMassParser(),
        BodyMassIndexParser(),
        LeanBodyMassParser(),
        BodyFatPercentageParser(),
        HeartRateParser(),
    ])


__all__ = [
    'BaseMetricParser',
    'ParserRegistry',
    'BodyFatPercentageParser',
    'BodyMassIndexParser',
    'BodyMassParser',
    'BodyMetricParser',
    'LeanBodyMassParser',
    'HeartRateParser',
    'SleepAnalysisParser',
    'StepCountParser',
    'default_registry',
]
