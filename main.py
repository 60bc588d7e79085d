import argparse
import sys
import logging
from pathlib import Path
from typing import Optional

from camtrack import __version__
from camtrack.utils import load_config, merge_configs, load_detections
from camtrack.pipelines import FramingPipeline

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False, log_file: Optional[str] = 'camtrack.log'):
    log_level = logging.DEBUG if debug else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a'))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers
    )
    logger.info("Logging initialized")


def print_system_info():
    logger.info("="*60)
    logger.info("CAMTRACK FRAMING")
    logger.info("="*60)
    logger.info(f"Python version: {sys.version.split()[0]}")
    logger.info(f"CamTrack version: {__version__}")
    logger.info("="*60)


def run_replay_mode(config: dict, input_path: str, output_path: str):
    if not Path(input_path).exists():
        logger.error(f"Input file not found: {input_path}")
        sys.exit(1)

    logger.info("Starting REPLAY mode")
    logger.info(f"Input: {input_path}")
    logger.info(f"Output: {output_path}")

    source_size, frames = load_detections(input_path)
    if source_size is not None:
        config['source'] = {'width': source_size[0], 'height': source_size[1]}
        logger.info(f"Source size from detections file: {source_size[0]}x{source_size[1]}")

    try:
        pipeline = FramingPipeline(config)
        records = pipeline.process_sequence(frames)
        pipeline.save_results(records, output_path)
        logger.info("Replay completed successfully")
    except Exception as e:
        logger.exception(f"Replay failed: {e}")
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(
        description='CamTrack - Smoothed automatic framing from face detections',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Replay recorded detections:
    python main.py replay --input detections.json --output framing.json
    python main.py replay --input detections.json --zoom 4.0 --anchor 0.5 --debug
        """
    )

    parser.add_argument(
        'mode',
        choices=['replay'],
        help='Operation mode: replay (recorded detections to framing track)'
    )

    parser.add_argument(
        '--config',
        default='configs/framing_config.yml',
        help='Path to framing config file (default: configs/framing_config.yml)'
    )

    parser.add_argument(
        '--input',
        required=True,
        help='Recorded detections JSON file'
    )

    parser.add_argument(
        '--output',
        default='output/framing.json',
        help='Framing track JSON file (default: output/framing.json)'
    )

    parser.add_argument(
        '--zoom',
        type=float,
        help='Zoom factor override (area multiplier, > 0)'
    )

    parser.add_argument(
        '--anchor',
        type=float,
        help='Vertical anchor override (0 = top, 0.5 = centered, 1 = bottom)'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--no-logging-file',
        action='store_true',
        help='Disable logging to file'
    )

    args = parser.parse_args()

    setup_logging(args.debug, None if args.no_logging_file else 'camtrack.log')
    print_system_info()

    try:
        if not Path(args.config).exists():
            logger.error(f"Config not found: {args.config}")
            sys.exit(1)

        logger.info("Loading configuration file...")
        config = load_config(args.config)

        overrides = {}
        if args.zoom is not None:
            overrides['zoom_factor'] = args.zoom
            logger.info(f"Zoom override: {args.zoom}")
        if args.anchor is not None:
            overrides['vertical_anchor'] = args.anchor
            logger.info(f"Anchor override: {args.anchor}")
        if overrides:
            config = merge_configs(config, {'tuning': overrides})

        if args.mode == 'replay':
            run_replay_mode(config, args.input, args.output)

        logger.info("Application finished successfully")

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
