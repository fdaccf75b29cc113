"""Parser for PokerNow ledger CSV exports."""

from loguru import logger

from src.core.exceptions import EmptyInputError

type RowRecord = dict[str, str]

BOM = "\ufeff"


def split_fields(line: str) -> list[str]:
    """Split one line on commas that are outside double quotes.

    A quote toggles quoted mode and is dropped from the value. Doubled quotes
    are not unescaped: ``"a""b"`` yields ``ab``.
    """
    values: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    values.append("".join(current).strip())

    return values


def parse_ledger(raw_text: str | None) -> list[RowRecord]:
    """Parse ledger text into one mapping per data row, keyed by header.

    Raises:
        EmptyInputError: if there is no header line followed by at least one
            data line.
    """
    text = (raw_text or "").removeprefix(BOM).strip()
    if not text:
        raise EmptyInputError(message="Ledger is empty")

    lines = text.split("\n")
    if len(lines) < 2:  # noqa: PLR2004
        raise EmptyInputError(
            message="Ledger needs a header row and at least one data row",
            details={"line_count": len(lines)},
        )

    headers = [header.replace('"', "").strip() for header in split_fields(lines[0])]

    rows: list[RowRecord] = []
    for line in lines[1:]:
        if not line.strip():
            continue
        values = split_fields(line)
        # Missing trailing columns become "", surplus values are dropped
        rows.append(
            {
                header: values[index] if index < len(values) else ""
                for index, header in enumerate(headers)
            }
        )

    logger.debug(f"Parsed ledger: {len(headers)} columns, {len(rows)} rows")
    return rows
