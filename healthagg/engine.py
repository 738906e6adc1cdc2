"""
Aggregation engine - routes export rows to parsers and merges their output.

A pure transformation: no file I/O and no state kept between calls beyond
the parser registry it was built with.
"""

from typing import Iterable
import logging

from .merger import merge
from .models import AggregationResult, DayRecord, ExportRow
from .parsers import ParserRegistry, default_registry

logger = logging.getLogger(__name__)


class HealthEngine:
    """
    Turns export rows from any number of metric files into daily records.

    Usage:
        engine = HealthEngine()
        result = engine.process(rows)
        for day in result.days:
            ...
    """

    def __init__(self, registry: ParserRegistry | None = None):
        self.registry = registry or default_registry()

    def process(self, rows: Iterable[ExportRow]) -> AggregationResult:
        """
        Route rows to their parsers, parse, merge and add derived metrics.

        Unclaimed rows are counted in the result but not logged here; what
        to do about them is the caller's decision.
        """
        routed, unclaimed = self.registry.route(rows)

        outputs: list[list[DayRecord]] = []
        errors: list[str] = []
        records_parsed = 0

        # Registry order is the merge order
        for parser in self.registry.parsers:
            parser_rows = routed[parser.name]
            if not parser_rows:
                continue

            days = parser.parse_file(parser_rows)
            records_parsed += parser.records_parsed
            errors.extend(f"[{parser.name}] {e}" for e in parser.errors)
            logger.info(
                f"{parser.name} parser produced {len(days)} daily records "
                f"from {len(parser_rows)} rows"
            )
            outputs.append(days)

        days = merge(outputs)

        return AggregationResult(
            days=days,
            errors=errors,
            records_parsed=records_parsed,
            unclaimed=len(unclaimed),
        )


def aggregate(
    rows: Iterable[ExportRow], registry: ParserRegistry | None = None
) -> list[DayRecord]:
    """Convenience wrapper returning only the daily records."""
    return HealthEngine(registry).process(rows).days
