from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from netCDF4 import num2date

# days per month; no leap year
DAYS_PER_MONTH = np.array([31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31])
DAYS_PER_YEAR = int(DAYS_PER_MONTH.sum())

ANNUAL_CALENDAR = "noleap"
MONTHLY_CALENDAR = "gregorian"


@dataclass
class TimeAxis:
    """Time coordinate values plus the attributes written alongside them."""

    values: np.ndarray
    units: str
    calendar: str
    reference_year: int
    long_name: str = "time"

    def __len__(self) -> int:
        return int(self.values.size)

    @property
    def attributes(self) -> dict[str, str]:
        return {
            "units": self.units,
            "calendar": self.calendar,
            "long_name": self.long_name,
        }

    def dates(self) -> np.ndarray:
        """Decode the axis into cftime/datetime objects."""
        return num2date(self.values, self.units, calendar=self.calendar)


def annual_time_axis(n_years: int, reference_year: int) -> TimeAxis:
    """
    Time axis for annual records: the last day of each 365-day year.

    Parameters
    ----------
    n_years:
        Number of years observed for the first point.
    reference_year:
        Year the ``days since`` units refer to.
    """
    if n_years < 1:
        raise ValueError(f"An annual time axis needs at least one year, got {n_years}.")
    values = np.arange(n_years, dtype=np.float64) * DAYS_PER_YEAR + (DAYS_PER_YEAR - 1)
    return TimeAxis(
        values=values,
        units=f"days since {reference_year:04d}-01-01 00:00:00",
        calendar=ANNUAL_CALENDAR,
        reference_year=reference_year,
    )


def monthly_time_axis(n_years: int, reference_year: int) -> TimeAxis:
    """
    Time axis for monthly records: the last day of every month, no leap years.

    Each year repeats the cumulative days-per-month sequence minus one, offset
    by the days of the preceding years.
    """
    if n_years < 1:
        raise ValueError(f"A monthly time axis needs at least one year, got {n_years}.")
    month_ends = np.cumsum(DAYS_PER_MONTH) - 1
    offsets = np.arange(n_years) * DAYS_PER_YEAR
    values = (offsets[:, np.newaxis] + month_ends[np.newaxis, :]).ravel().astype(np.float64)
    return TimeAxis(
        values=values,
        units=f"day since {reference_year:04d}-01-01 00:00:00",
        calendar=MONTHLY_CALENDAR,
        reference_year=reference_year,
    )
