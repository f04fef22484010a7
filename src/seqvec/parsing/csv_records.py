"""CSV line parsing into named feature records.

Lines are split on a literal comma: no quoting, no header row, no
trimming of the name field.
"""

import logging
from fractions import Fraction
from pathlib import Path
from typing import List, Optional, Union, Iterable

import numpy as np

from seqvec.domain.exceptions import RecordParseError
from seqvec.domain.models import Record

logger = logging.getLogger(__name__)

DELIMITER = ","


def _nearest_single(value: np.float32, exact: Fraction) -> np.float32:
    candidates = (
        np.nextafter(value, np.float32(-np.inf)),
        value,
        np.nextafter(value, np.float32(np.inf)),
    )
    # ties go to the even bit pattern
    return min(
        (c for c in candidates if np.isfinite(c)),
        key=lambda c: (abs(Fraction(float(c)) - exact), int(c.view(np.uint32)) & 1),
    )


def parse_feature(text: str) -> float:
    """Parse one field as a single-precision float, widened to double.

    The decimal text is rounded once, straight to the nearest float, so
    inputs close to a rounding midpoint land where ``Float.parseFloat`` puts
    them.
    """
    text = text.strip()
    try:
        value = np.float32(float(text))
    except (ValueError, TypeError) as e:
        raise ValueError(f"not a number: {text!r}") from e
    if not np.isfinite(value):
        return float(value)
    try:
        exact = Fraction(text)
    except ValueError:
        return float(value)
    if exact == 0:
        return float(value)
    return float(_nearest_single(value, exact))


def parse_line(
    line: str,
    column_count: int,
    line_number: Optional[int] = None,
) -> Record:
    """Turn ``name,f1,...,f{column_count-1}`` into a Record."""
    fields = line.split(DELIMITER)
    if len(fields) < column_count:
        raise RecordParseError(
            f"expected {column_count} fields, found {len(fields)}",
            line_number=line_number,
            line=line,
        )
    if len(fields) > column_count:
        logger.debug(
            "Line %s has %d fields; ignoring all past column %d",
            line_number, len(fields), column_count,
        )

    features = []
    for index in range(1, column_count):
        try:
            features.append(parse_feature(fields[index]))
        except ValueError as e:
            raise RecordParseError(
                f"field {index}: {e}",
                line_number=line_number,
                line=line,
                field_name=f"feature_{index}",
                field_value=fields[index],
            ) from e

    return Record(name=fields[0], features=tuple(features))


def parse_lines(lines: Iterable[str], column_count: int) -> List[Record]:
    """Parse already-split lines (without terminators); line numbers start at 1."""
    return [
        parse_line(line, column_count, line_number=number)
        for number, line in enumerate(lines, start=1)
    ]


def read_records(path: Union[str, Path], column_count: int) -> List[Record]:
    """Read every line of ``path`` into an ordered list of records.

    Any bad line aborts the whole read.
    """
    path = Path(path)
    records: List[Record] = []
    with open(path, "r", encoding="utf-8", errors="replace") as fh:
        for number, raw in enumerate(fh, start=1):
            line = raw[:-1] if raw.endswith("\n") else raw
            try:
                records.append(parse_line(line, column_count, line_number=number))
            except RecordParseError as e:
                e.add_context('source', str(path))
                raise
    logger.info("Parsed %d records from %s", len(records), path)
    return records
