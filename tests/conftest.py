"""Shared fixtures for converter tests."""

from pathlib import Path

import pytest


def write_table(path: Path, header: str, rows) -> Path:
    """Write an LPJ-style ASCII table: one header line, whitespace-separated rows."""
    lines = [header]
    for row in rows:
        lines.append(" ".join(str(value) for value in row))
    path.write_text("\n".join(lines) + "\n")
    return path


def monthly_row(lon, lat, year, base):
    return [lon, lat, year] + [base + month for month in range(12)]


@pytest.fixture
def annual_single_point(tmp_path):
    """One point, three years, two data columns."""
    return write_table(
        tmp_path / "single.out",
        "Lon Lat Year C3G C4G",
        [
            (10.0, 20.0, 1901, 1.0, 10.0),
            (10.0, 20.0, 1902, 2.0, 20.0),
            (10.0, 20.0, 1903, 3.0, 30.0),
        ],
    )


@pytest.fixture
def annual_two_points(tmp_path):
    return write_table(
        tmp_path / "two.out",
        "Lon Lat Year Total",
        [
            (10.0, 20.0, 1901, 1.5),
            (10.0, 20.0, 1902, 2.5),
            (-50.0, -30.0, 1901, 7.0),
            (-50.0, -30.0, 1902, 8.0),
        ],
    )


@pytest.fixture
def monthly_two_points(tmp_path):
    """Two points with two years of monthly values each."""
    return write_table(
        tmp_path / "mpet.out",
        "Lon Lat Year Jan Feb Mar Apr May Jun Jul Aug Sep Oct Nov Dec",
        [
            monthly_row(10.0, 20.0, 1901, 100),
            monthly_row(10.0, 20.0, 1902, 200),
            monthly_row(-50.0, -30.0, 1901, 300),
            monthly_row(-50.0, -30.0, 1902, 400),
        ],
    )
