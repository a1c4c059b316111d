"""
Command Line Interface for the sheet image build.
"""

import argparse
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv

from .build_config import BuildConfig, CROP_POSITIONS
from .generation_progress import GenerationProgress
from .generator import Generator
from .image_fetcher import ImageFetcher
from .manifest import Manifest
from .reporter import Reporter
from .sheet_source import SheetError, SheetSource
from .thumbnail_generator import ThumbnailGenerator


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('sheetthumbs')


def get_build_config(args: argparse.Namespace) -> BuildConfig:
    """Get build configuration from environment and CLI overrides."""
    config = BuildConfig.from_env()

    tab = getattr(args, 'tab', None)
    if tab and tab != config.sheet_tab:
        # Tab-dependent defaults follow the tab chosen on the command line
        env = dict(os.environ)
        env['SHEET_TAB'] = tab
        config = BuildConfig.from_env(env)

    return config.with_overrides(
        sheet_id=getattr(args, 'sheet_id', None),
        out_dir=getattr(args, 'out_dir', None),
        width=getattr(args, 'width', None),
        height=getattr(args, 'height', None),
        source_column=getattr(args, 'column', None),
        force_rebuild=getattr(args, 'force', None),
        crop_position=getattr(args, 'crop', None),
        verify_dimensions=getattr(args, 'verify_dimensions', None),
    )


def cmd_build(args: argparse.Namespace) -> int:
    """Execute build command."""
    logger = setup_logging(args.verbose)

    try:
        config = get_build_config(args)
    except ValueError as e:
        logger.error(str(e))
        return 1

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    tab = config.sheet_tab
    logger.info(f"[{tab}] Sheet: {config.sheet_id}")
    logger.info(f"[{tab}] Column: {config.source_column}")
    logger.info(f"[{tab}] Output: {config.out_dir} ({config.width}x{config.height}, crop {config.crop_position})")
    if config.force_rebuild:
        logger.info(f"[{tab}] Force rebuild: existing images will be replaced")

    os.makedirs(config.out_dir, exist_ok=True)

    try:
        rows = SheetSource(config, logger=logger).load_rows()
    except SheetError as e:
        logger.error(f"[{tab}] {e}")
        return 1

    fetcher = ImageFetcher(config.user_agent, timeout=config.timeout, logger=logger)
    thumb_gen = ThumbnailGenerator(
        config.width,
        config.height,
        quality=config.quality,
        crop_position=config.crop_position,
        logger=logger,
    )
    generator = Generator(config, fetcher, thumb_gen, logger=logger)

    progress = None
    if not args.quiet:
        progress = GenerationProgress(tab, show_files=args.show_files, logger=logger)

    try:
        manifest = generator.generate(rows, progress=progress, limit=args.limit)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    manifest_path = manifest.save(config.out_dir)
    logger.info(f"[{tab}] Manifest saved to: {manifest_path}")

    stats = generator.stats
    logger.info(
        f"[{tab}] Summary: written={stats.written} exists={stats.exists} "
        f"skipped={stats.skipped} errors={stats.errors}"
    )
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    """Execute report command."""
    logger = setup_logging(args.verbose)

    try:
        manifest = Manifest.load(args.manifest)
    except FileNotFoundError:
        logger.error(f"Manifest not found: {args.manifest}")
        return 1
    except ValueError as e:
        logger.error(f"Failed to load manifest: {e}")
        return 1

    reporter = Reporter()
    if args.type == 'summary':
        reporter.report_summary(manifest)
    elif args.type == 'errors':
        reporter.report_errors(manifest)

    return 0


def positive_int(value: str) -> int:
    """argparse type for counts of 1 or more."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='sheetthumbs',
        description='Build fixed-size thumbnails from a published spreadsheet of image URLs',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  1. Build:  SHEET_TAB=ETSY python -m sheetthumbs build
  2. Report: python -m sheetthumbs report --manifest images/etsy/_manifest.json

Configuration:
  SHEET_ID, SHEET_TAB, OUT_DIR, WIDTH, HEIGHT, FORCE_REBUILD, CROP_POSITION,
  SOURCE_COLUMN, VERIFY_DIMENSIONS, USER_AGENT and HTTP_TIMEOUT are read from
  the environment (and a .env file). Command line flags take precedence.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Build command
    build_parser = subparsers.add_parser('build', help='Fetch the sheet and build images')
    build_parser.add_argument('--tab', help='Override SHEET_TAB')
    build_parser.add_argument('--sheet-id', help='Override SHEET_ID')
    build_parser.add_argument('-o', '--out-dir', help='Override OUT_DIR')
    build_parser.add_argument('--width', type=int, help='Override WIDTH')
    build_parser.add_argument('--height', type=int, help='Override HEIGHT')
    build_parser.add_argument('--column', help='Override the source URL column header')
    build_parser.add_argument('--crop', choices=CROP_POSITIONS, help='Override CROP_POSITION')
    build_parser.add_argument('-f', '--force', action='store_true', default=None,
                              help='Rebuild every image (FORCE_REBUILD=1)')
    build_parser.add_argument('--no-verify-dimensions', action='store_false', default=None,
                              dest='verify_dimensions',
                              help='Reuse existing files without checking their size')
    build_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress per-row output')
    build_parser.add_argument('--show-files', action='store_true',
                              help='Print each row as processed with result')
    build_parser.add_argument('--limit', type=positive_int, metavar='N',
                              help='Limit to N rows (for testing)')
    build_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    # Report command
    report_parser = subparsers.add_parser('report', help='Summarize a build manifest')
    report_parser.add_argument('-m', '--manifest', required=True,
                               help='Manifest file or output directory')
    report_parser.add_argument('-t', '--type', choices=['summary', 'errors'],
                               default='summary', help='Report type')
    report_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()

    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'build':
        return cmd_build(parsed_args)
    elif parsed_args.command == 'report':
        return cmd_report(parsed_args)

    return 1
