"""
Reading Health Export CSV text into export rows.

Each export file holds one metric and starts with a "sep=," line followed
by the column header.
"""

from pathlib import Path
from typing import Iterable
import logging

from .constants import HEADER_LINES, MIN_INTERVAL_FIELDS
from .models import ExportRow
from .tokenizer import split_line

logger = logging.getLogger(__name__)


def parse_lines(lines: Iterable[str], skip_header: bool = True) -> list[ExportRow]:
    """
    Tokenize export lines into rows.

    Blank lines and lines with fewer than the minimum number of fields are
    skipped.
    """
    rows: list[ExportRow] = []
    skipped = 0
    for index, line in enumerate(lines):
        if skip_header and index < HEADER_LINES:
            continue
        fields = split_line(line)
        if not fields:
            continue
        if len(fields) < MIN_INTERVAL_FIELDS:
            skipped += 1
            continue
        rows.append(ExportRow(tuple(fields)))

    if skipped:
        logger.debug(f"Skipped {skipped} short lines")
    return rows


def parse_health_csv(text: str) -> list[ExportRow]:
    """Tokenize the full text of one export file."""
    return parse_lines(text.split('\n'))


def read_health_csv(path: Path | str) -> list[ExportRow]:
    """Read and tokenize one export file. I/O errors propagate to the caller."""
    path = Path(path)
    with open(path, 'r', newline='', encoding='utf-8') as f:
        rows = parse_health_csv(f.read())
    logger.info(f"Read {len(rows)} rows from {path.name}")
    return rows
