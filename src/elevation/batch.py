"""Batch enrichment of coordinate lists with elevation statistics.

Per-item failures (unresolvable coordinates, oversized regions, no data) are
tallied and the batch carries on. ``ConfigurationError`` is not caught: a
broken dataset aborts the run.
"""

from __future__ import annotations

import asyncio
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from domain.errors import QueryError
from shared.constants import BATCH_LOG_MEMORY_EVERY
from shared.diagnostics import log_memory_usage

if TYPE_CHECKING:
    from collections.abc import Sequence

    from domain.models import Coordinate
    from elevation.query import ElevationQuery
    from shared.progress import ConsoleProgress

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    OK = 'ok'
    NO_DATA = 'no_data'
    ERROR = 'error'


@dataclass
class BatchReport:
    """Tally of one enrichment run."""

    total: int = 0
    succeeded: int = 0
    no_data: int = 0
    errors: int = 0
    # (index, message) of hard per-item failures
    error_details: list[tuple[int, str]] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return self.no_data + self.errors

    def record(self, index: int, outcome: Outcome, detail: str | None = None) -> None:
        self.total += 1
        if outcome is Outcome.OK:
            self.succeeded += 1
        elif outcome is Outcome.NO_DATA:
            self.no_data += 1
        else:
            self.errors += 1
            self.error_details.append((index, detail or ''))


def _check_apothem(apothem: float) -> float:
    apothem = float(apothem)
    if not math.isfinite(apothem) or apothem < 0:
        msg = f'apothem must be a finite number >= 0, got {apothem}'
        raise ValueError(msg)
    return apothem


def enrich_one(
    query: ElevationQuery, coord: Coordinate, apothem: float
) -> tuple[Outcome, str | None]:
    """Query one coordinate and attach the result to it in place."""
    try:
        result = query.query(coord.point, apothem)
    except QueryError as e:
        logger.debug('Skipping (%s, %s): %s', coord.lat, coord.lng, e)
        return Outcome.ERROR, str(e)
    if result is None:
        logger.debug('No elevation data at (%s, %s)', coord.lat, coord.lng)
        return Outcome.NO_DATA, None
    coord.elevation = result
    return Outcome.OK, None


def _log_summary(report: BatchReport, apothem: float) -> None:
    logger.info(
        'Calculated the elevation for %d / %d locations with an apothem of %s metres',
        report.succeeded,
        report.total,
        apothem,
    )
    if report.failed:
        logger.warning(
            'Elevation for %d locations could not be found (%d no data, %d invalid)',
            report.failed,
            report.no_data,
            report.errors,
        )


def enrich_coordinates(
    coords: Sequence[Coordinate],
    query: ElevationQuery,
    apothem: float,
    *,
    workers: int = 1,
    progress: ConsoleProgress | None = None,
) -> BatchReport:
    """
    Attach elevation statistics to every coordinate that has data.

    Args:
        coords: Coordinates to enrich; successful ones get ``elevation`` set.
        query: Lookup engine.
        apothem: Half-width of the sampling square in metres, shared by all.
        workers: Thread count; 1 runs sequentially.
        progress: Optional progress bar stepped once per coordinate.

    Returns:
        BatchReport with per-outcome counts.

    Raises:
        ConfigurationError: tile data is missing or malformed.
    """
    apothem = _check_apothem(apothem)
    report = BatchReport()

    def _step(index: int, outcome: Outcome, detail: str | None) -> None:
        report.record(index, outcome, detail)
        if progress is not None:
            progress.step_sync(1)
        if report.total % BATCH_LOG_MEMORY_EVERY == 0:
            log_memory_usage(f'after {report.total} locations')

    if workers <= 1:
        for index, coord in enumerate(coords):
            _step(index, *enrich_one(query, coord, apothem))
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='elevation') as pool:
            outcomes = pool.map(lambda c: enrich_one(query, c, apothem), coords)
            for index, (outcome, detail) in enumerate(outcomes):
                _step(index, outcome, detail)

    _log_summary(report, apothem)
    return report


async def enrich_coordinates_async(
    coords: Sequence[Coordinate],
    query: ElevationQuery,
    apothem: float,
    *,
    concurrency: int = 4,
    progress: ConsoleProgress | None = None,
) -> BatchReport:
    """Async variant of :func:`enrich_coordinates`; queries run in threads."""
    apothem = _check_apothem(apothem)
    sem = asyncio.Semaphore(max(1, concurrency))

    async def worker(coord: Coordinate) -> tuple[Outcome, str | None]:
        async with sem:
            out = await asyncio.to_thread(enrich_one, query, coord, apothem)
        if progress is not None:
            await progress.step(1)
        return out

    outcomes = await asyncio.gather(*(worker(c) for c in coords))
    report = BatchReport()
    for index, (outcome, detail) in enumerate(outcomes):
        report.record(index, outcome, detail)
    _log_summary(report, apothem)
    return report
