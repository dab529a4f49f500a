from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, NamedTuple, Optional

from .exceptions import UnsortedInput
from .records import InputRecord

logger = logging.getLogger(__name__)


class Position(NamedTuple):
    point_index: int
    year_offset: int
    new_point: bool


@dataclass
class ScanState:
    """
    Streaming point-boundary detector.

    Input must be sorted per point with strictly ascending years; a year lower
    than the previous record's starts the next point. With ``validate_order``
    a repeated year, or a coordinate change without a year decrease, raises
    UnsortedInput instead of being silently attributed to the current point.
    """

    validate_order: bool = True
    previous_year: Optional[int] = None
    point_index: int = -1
    year_offset: int = -1
    _coordinates: Optional[tuple] = field(default=None, repr=False)

    def observe(self, record: InputRecord) -> Position:
        starts_point = self.previous_year is None or record.year < self.previous_year

        if starts_point:
            self.point_index += 1
            self.year_offset = 0
            self._coordinates = (record.lon, record.lat)
        else:
            if self.validate_order:
                self._check_order(record)
            self.year_offset += 1

        self.previous_year = record.year
        return Position(self.point_index, self.year_offset, starts_point)

    def _check_order(self, record: InputRecord) -> None:
        if record.year == self.previous_year:
            raise UnsortedInput(
                f"Line {record.line_number}: year {record.year} repeated within point "
                f"{self.point_index} at ({record.lon}, {record.lat})."
            )
        if (record.lon, record.lat) != self._coordinates:
            raise UnsortedInput(
                f"Line {record.line_number}: coordinate changed from {self._coordinates} to "
                f"({record.lon}, {record.lat}) without the year sequence restarting."
            )


@dataclass
class Point:
    index: int
    lon: float
    lat: float
    records: List[InputRecord]

    @property
    def first_year(self) -> int:
        return self.records[0].year

    @property
    def n_years(self) -> int:
        return len(self.records)


def iter_points(records: Iterable[InputRecord], state: Optional[ScanState] = None) -> Iterator[Point]:
    """
    Group a flat record stream into points.

    Only the records of the point being assembled are held in memory.
    """
    state = state or ScanState()
    current: Optional[Point] = None

    for record in records:
        position = state.observe(record)
        if position.new_point:
            if current is not None:
                yield current
            current = Point(position.point_index, record.lon, record.lat, [])
            logger.debug("Point %d starts at (%s, %s)", position.point_index, record.lon, record.lat)
        current.records.append(record)

    if current is not None:
        yield current
