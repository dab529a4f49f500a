from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, NamedTuple, Tuple

from .exceptions import ColumnCountMismatch, EmptyInput, MalformedRecord


# lon, lat, year
COORDINATE_FIELDS = 3
MONTHS_PER_YEAR = 12
MONTHLY_FIELD_COUNT = COORDINATE_FIELDS + MONTHS_PER_YEAR


class InputRecord(NamedTuple):
    lon: float
    lat: float
    year: int
    values: Tuple[float, ...]
    line_number: int = 0


@dataclass
class InputTable:
    """Header and raw record lines of one LPJ output file."""

    path: Path
    header: List[str]
    lines: List[Tuple[int, str]]
    monthly: bool = False

    @property
    def expected_fields(self) -> int:
        if self.monthly:
            return MONTHLY_FIELD_COUNT
        return len(self.header)

    @property
    def variable_names(self) -> List[str]:
        """Names of the data columns (annual mode)."""
        return self.header[COORDINATE_FIELDS:]

    def __len__(self) -> int:
        return len(self.lines)

    def records(self) -> Iterator[InputRecord]:
        expected = self.expected_fields
        for line_number, line in self.lines:
            yield parse_record(line, expected, line_number)


def read_table(path: str | Path, *, monthly: bool = False) -> InputTable:
    """
    Read an LPJ ASCII output file into memory.

    The first line is a header. In annual mode its tokens from the fourth on
    name the data columns; in monthly mode it is skipped. Blank lines are
    ignored.
    """
    path = Path(path)
    raw_lines = path.read_text().splitlines()
    if not raw_lines:
        raise EmptyInput(f'File "{path}" has zero size.')

    header = raw_lines[0].split()
    lines = [
        (number, line)
        for number, line in enumerate(raw_lines[1:], start=2)
        if line.strip()
    ]
    if not lines:
        raise EmptyInput(f'File "{path}" holds no records below the header.')

    table = InputTable(path=path, header=header, lines=lines, monthly=monthly)
    if not monthly and len(header) <= COORDINATE_FIELDS:
        raise ColumnCountMismatch(COORDINATE_FIELDS + 1, len(header), line_number=1)
    return table


def parse_record(line: str, expected_fields: int, line_number: int = 0) -> InputRecord:
    """Split one whitespace-separated record line and check its field count."""
    fields = line.split()
    if len(fields) != expected_fields:
        raise ColumnCountMismatch(expected_fields, len(fields), line_number=line_number)

    try:
        lon = float(fields[0])
        lat = float(fields[1])
        year = int(float(fields[2]))
        values = tuple(float(value) for value in fields[COORDINATE_FIELDS:])
    except ValueError as exc:
        raise MalformedRecord(f"Line {line_number}: non-numeric field in {line!r}.") from exc

    return InputRecord(lon, lat, year, values, line_number)
