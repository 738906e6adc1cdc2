"""
Base parser interface for all per-metric parsers.

Each metric family (steps, sleep, body composition, heart rate) implements
this interface to turn its export rows into per-day metric entries.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Sequence
import logging

from ..models import DayRecord, ExportRow, RawRecord

logger = logging.getLogger(__name__)


class BaseMetricParser(ABC):
    """
    Abstract base class for all per-metric parsers.

    Each parser is responsible for:
    1. Claiming the metric-type identifiers it understands
    2. Turning one export row into a RawRecord (or skipping it)
    3. Folding its RawRecords into one DayRecord per date

    Usage:
        parser = StepCountParser()
        days = parser.parse_file(rows)
    """

    # Override in subclasses
    METRIC_TYPE: str = ''
    METRIC_KEY: str = ''
    MIN_FIELDS: int = 9

    def __init__(self):
        self.errors: list[str] = []
        self.records_parsed = 0

    @property
    def name(self) -> str:
        return self.METRIC_KEY

    def can_handle(self, metric_type: str) -> bool:
        """Exact match on the row's metric-type identifier."""
        return metric_type == self.METRIC_TYPE

    @abstractmethod
    def parse_record(self, row: ExportRow) -> RawRecord | None:
        """
        Convert a single export row into a RawRecord.

        Returns:
            The parsed record, or None if the row is not usable
        """
        pass

    @abstractmethod
    def build_days(self, records: list[RawRecord]) -> list[DayRecord]:
        """Fold parsed records into one DayRecord per distinct date."""
        pass

    def parse_records(self, rows: Iterable[ExportRow]) -> list[RawRecord]:
        """Parse every row, skipping (and recording) the malformed ones."""
        records: list[RawRecord] = []
        for row in rows:
            if len(row) < self.MIN_FIELDS:
                self._log_error(
                    f"Skipping row with {len(row)} fields (need {self.MIN_FIELDS})"
                )
                continue
            try:
                record = self.parse_record(row)
            except (ValueError, IndexError) as e:
                self._log_error(f"Could not parse row {list(row.fields)}", e)
                continue
            if record is not None:
                records.append(record)
        return records

    def parse_file(self, rows: Iterable[ExportRow]) -> list[DayRecord]:
        """
        Parse all rows of one metric and return its per-day records.
        Never raises for bad data; empty input gives an empty list.
        """
        self.errors = []
        records = self.parse_records(rows)
        self.records_parsed = len(records)
        if not records:
            return []
        return self.build_days(records)

    def _log_error(self, message: str, exception: Exception | None = None):
        """Log and track a skipped row."""
        if exception:
            message = f"{message}: {str(exception)}"
        logger.warning(f"[{self.name}] {message}")
        self.errors.append(message)


class ParserRegistry:
    """
    Ordered set of parsers, keyed by the metric-type identifier they claim.

    The registration order is also the merge order: when two parsers write
    the same metric key for the same date, the later one wins.
    """

    def __init__(self, parsers: Sequence[BaseMetricParser] = ()):
        self._parsers: list[BaseMetricParser] = []
        self._by_type: dict[str, BaseMetricParser] = {}
        for parser in parsers:
            self.register(parser)

    def register(self, parser: BaseMetricParser) -> BaseMetricParser:
        """Register a parser instance. A metric type can only be claimed once."""
        if parser.METRIC_TYPE in self._by_type:
            raise ValueError(f"Metric type already registered: {parser.METRIC_TYPE}")
        self._parsers.append(parser)
        self._by_type[parser.METRIC_TYPE] = parser
        return parser

    @property
    def parsers(self) -> list[BaseMetricParser]:
        return list(self._parsers)

    def get_parser_for(self, metric_type: str) -> BaseMetricParser | None:
        """Find the parser that claims the given metric type."""
        return self._by_type.get(metric_type)

    def get_parser_by_name(self, name: str) -> BaseMetricParser | None:
        """Get a parser by its metric key (e.g. 'StepCount')."""
        for parser in self._parsers:
            if parser.name == name:
                return parser
        return None

    def list_parsers(self) -> list[str]:
        """List all registered parser names, in merge order."""
        return [p.name for p in self._parsers]

    def route(
        self, rows: Iterable[ExportRow]
    ) -> tuple[dict[str, list[ExportRow]], list[ExportRow]]:
        """
        Group rows by the parser that claims them.

        Returns:
            (rows per parser name in registry order, unclaimed rows)
        """
        routed: dict[str, list[ExportRow]] = {p.name: [] for p in self._parsers}
        unclaimed: list[ExportRow] = []
        for row in rows:
            parser = self.get_parser_for(row.metric_type)
            if parser is None:
                unclaimed.append(row)
            else:
                routed[parser.name].append(row)
        return routed, unclaimed
