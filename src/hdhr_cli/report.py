"""Render per-series storage statistics as a text table."""
from typing import Literal

from hdhr_cli.models import SeriesStat

GIB = 1024 * 1024 * 1024
COLUMN_PADDING = 3
HEADER = ('SERIES TITLE', 'EPISODES', 'STORAGE USED')
TOTAL_LINE: Literal['Total Series Found: {0}'] = 'Total Series Found: {0}'


def format_size(total_bytes: int) -> str:
    """Express a byte count in GiB with two decimals."""
    return f'{total_bytes / GIB:.2f} GB'


def sort_series(series_map: dict[str, SeriesStat]) -> list[SeriesStat]:
    """Order series from smallest to largest storage footprint."""
    return sorted(series_map.values(), key=lambda stat: stat.total_bytes)


def align_columns(rows: list[tuple[str, ...]]) -> list[str]:
    """Left-align cells so every column is as wide as its widest cell."""
    widths = [
        max(len(row[col]) for row in rows) + COLUMN_PADDING
        for col in range(len(rows[0]))
    ]
    return [
        ''.join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    ]


def render_table(series_map: dict[str, SeriesStat]) -> list[str]:
    """Build the report lines, smallest series first, then a total."""
    rows = [HEADER, tuple('-' * len(title) for title in HEADER)]
    rows.extend(
        (stat.title, str(stat.episode_count), format_size(stat.total_bytes))
        for stat in sort_series(series_map)
    )
    lines = align_columns(rows)
    lines.append('')
    lines.append(TOTAL_LINE.format(len(series_map)))
    return lines
