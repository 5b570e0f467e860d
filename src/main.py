"""Command-line entry point: enrich a coordinate file with GLOBE elevations."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from coords_io import read_document, write_document
from domain.errors import ConfigurationError
from domain.profiles import build_settings, load_profile
from elevation.batch import enrich_coordinates
from elevation.query import ElevationQuery
from shared.constants import DEFAULT_LOG_LEVEL
from shared.progress import ConsoleProgress

logger = logging.getLogger(__name__)


def setup_logging(level: str = DEFAULT_LOG_LEVEL, log_file: Path | None = None) -> None:
    """Configure root logging: stdout plus an optional log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding='utf-8'))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def _apothem(value: str) -> float:
    try:
        apothem = float(value)
    except ValueError:
        msg = 'Apothem must be a number'
        raise argparse.ArgumentTypeError(msg) from None
    if not (apothem >= 0) or apothem == float('inf'):
        msg = 'Apothem must be a finite number >= 0'
        raise argparse.ArgumentTypeError(msg)
    return apothem


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='globe-elevation',
        description='Attach GLOBE elevation statistics to every location of a JSON coordinate file.',
    )
    parser.add_argument(
        'input',
        type=Path,
        help='JSON file with a "customCoordinates" list of {lat, lng} locations',
    )
    parser.add_argument(
        'apothem',
        type=_apothem,
        help='distance in metres to check in each direction from the coordinate to calculate variance',
    )
    parser.add_argument('--data-dir', type=Path, default=None, help='directory with the a10g..p10g tile files')
    parser.add_argument('--output', type=Path, default=None, help='output file (default: output.json)')
    parser.add_argument('--profile', type=Path, default=None, help='TOML settings profile')
    parser.add_argument('--workers', type=int, default=None, help='parallel query threads')
    parser.add_argument(
        '--memory-map',
        action='store_true',
        default=None,
        help='memory-map tile files instead of reading them into RAM',
    )
    parser.add_argument('--log-level', default=None, help='DEBUG, INFO, WARNING or ERROR')
    parser.add_argument('--log-file', type=Path, default=None, help='also write the log to this file')
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one batch; returns the process exit status."""
    args = build_parser().parse_args(argv)
    overrides = {
        'data_dir': args.data_dir,
        'apothem_m': args.apothem,
        'output_path': args.output,
        'workers': args.workers,
        'memory_map': args.memory_map,
        'log_level': args.log_level,
    }
    setup_logging(args.log_level or DEFAULT_LOG_LEVEL, args.log_file)

    try:
        if args.profile is not None:
            settings = load_profile(args.profile, **overrides)
        else:
            settings = build_settings(**overrides)
        logging.getLogger().setLevel(settings.log_level)

        logger.info('Loading input file %s', args.input)
        doc = read_document(args.input)
        coords = doc.custom_coordinates

        query = ElevationQuery.from_settings(settings)
        progress = ConsoleProgress(len(coords))
        try:
            report = enrich_coordinates(
                coords,
                query,
                settings.apothem_m,
                workers=settings.workers,
                progress=progress,
            )
        finally:
            progress.close()

        write_document(doc, settings.output_path)
    except ConfigurationError as e:
        logger.error('Aborting: %s', e)
        return 1

    print(
        f'\nSuccessfully calculated the elevation for {report.succeeded:,} / {report.total:,} '
        f'locations with an apothem of {settings.apothem_m:,} metres.'
    )
    if report.failed > 0:
        print(
            f'\nElevation for {report.failed:,} locations could not be found. This usually happens '
            "when the location is too close to water or other areas that don't have elevation data."
        )
    print(f'\nOutput saved to "{settings.output_path}"')
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == '__main__':
    run()
