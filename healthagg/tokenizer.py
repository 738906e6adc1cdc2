"""
Delimited line tokenizer for Health Export CSV rows.

Device descriptions in the export contain commas inside double quotes
(e.g. "iPhone13,2"), so a plain split is not enough. Malformed quoting is
never an error; the line is split as well as it can be.
"""

DELIMITER = ','
QUOTE = '"'


def split_line(line: str, delimiter: str = DELIMITER) -> list[str]:
    """
    Split one line into its fields.

    A quote character toggles the "inside quotes" state and is dropped from
    the output. Outside quotes the delimiter starts a new field. Carriage
    returns and newlines are removed from every field.

    Returns an empty list for an empty (or whitespace-only) line.
    """
    if not line or not line.strip():
        return []

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append(_clean(current))
            current = []
        else:
            current.append(char)

    fields.append(_clean(current))
    return fields


def _clean(chars: list[str]) -> str:
    return ''.join(chars).replace('\r', '').replace('\n', '')
