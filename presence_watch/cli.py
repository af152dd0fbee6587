"""
Presence Watch command-line interface.

Responsibility:
    Parse command-line arguments, configure the application, load the
    cascades, wire the frame pipeline to the I/O handlers, and run the
    main processing loop.

Usage:
    presence-watch                                  # Webcam 0, display window
    presence-watch --source doorway.mp4 --output-mode save_json
    presence-watch --timeout 10 --log-file logs/doorway.txt
    python -m presence_watch --config my_config.yaml
"""

import argparse
import logging
import time
from dataclasses import replace

from presence_watch.config import AppConfig, load_config, validate_config
from presence_watch.errors import ConfigError, DetectorError
from presence_watch.input_handler import InputHandler
from presence_watch.model_loader import load_cascades
from presence_watch.output_handler import OutputHandler
from presence_watch.pipeline import build_pipeline

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LOG_DATEFMT = "%H:%M:%S"


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="presence-watch",
        description="Presence Watch: debounced face presence detection",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--source",
        type=str,
        help="Input source: '0' for webcam, or path to a video file.",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to YAML configuration file.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds without a face before an absence is confirmed. Overrides config.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Append-only presence event log. Overrides config.",
    )
    parser.add_argument(
        "--output-mode",
        type=str,
        help="Output mode(s), comma-separated: display, save_video, save_json, "
             "or none. Overrides config.",
    )
    parser.add_argument(
        "--output-path",
        type=str,
        help="Directory for output artifacts. Overrides config.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-frame detection counts.",
    )

    return parser.parse_args(argv)


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return a copy of config with CLI overrides applied and re-validated."""
    if args.source is not None:
        config = replace(config, input=replace(config.input, source=args.source))

    presence_overrides = {}
    if args.timeout is not None:
        presence_overrides["timeout_seconds"] = args.timeout
    if args.log_file is not None:
        presence_overrides["log_path"] = args.log_file
    if presence_overrides:
        config = replace(config, presence=replace(config.presence, **presence_overrides))

    output_overrides = {}
    if args.output_mode is not None:
        output_overrides["mode"] = args.output_mode.lower()
    if args.output_path is not None:
        output_overrides["save_path"] = args.output_path
    if output_overrides:
        config = replace(config, output=replace(config.output, **output_overrides))

    validate_config(config)
    return config


def main(argv=None) -> int:
    """Main execution loop."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=_LOG_FORMAT,
        datefmt=_LOG_DATEFMT,
    )

    # 1. Load Configuration (CLI args > ENV > YAML > Defaults)
    try:
        config = apply_overrides(load_config(args.config), args)
        logger.info("Configuration active for this run.")
    except Exception as e:
        logger.error("Configuration error: %s", e)
        return 1

    # 2. Load cascades; released on every exit path below
    try:
        bank = load_cascades(config.cascades)
    except ConfigError as e:
        logger.error("Initialization failed: %s", e)
        return 1

    with bank:
        try:
            pipeline = build_pipeline(config, bank)
            input_handler = InputHandler(
                source=config.input.source,
                resize_width=config.input.resize_width,
            )
        except (FileNotFoundError, ValueError, RuntimeError) as e:
            logger.error("Initialization failed: %s", e)
            return 1

        try:
            output_handler = OutputHandler(config)
        except OSError as e:
            logger.error("Cannot prepare output directory: %s", e)
            input_handler.release()
            return 1

        return run_loop(pipeline, input_handler, output_handler)


def run_loop(pipeline, input_handler, output_handler) -> int:
    """Process frames until the source ends or the user quits.

    A frame whose detection fails is skipped. The input is released and
    the outputs finalized on every exit path.

    Returns:
        0 on a normal end of stream or user stop, 1 on an unexpected error.
    """
    logger.info("Starting processing loop. Press 'q' or ESC to quit in display mode.")

    frames_read = 0
    skipped = 0
    start_time = time.perf_counter()

    try:
        for frame_id, frame in input_handler:
            frames_read += 1

            try:
                detections, event = pipeline.process(frame)
            except DetectorError as e:
                skipped += 1
                logger.warning("Skipping frame %d: %s", frame_id, e)
                continue

            if pipeline.frames_processed % 30 == 0:
                logger.info("Processed %d frames...", pipeline.frames_processed)

            # process_frame returns False on exit request (e.g. 'q' key)
            if not output_handler.process_frame(frame_id, frame, detections, event):
                logger.info("Stopping loop per user request.")
                break

    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
    except Exception as e:
        logger.exception("Runtime error during processing: %s", e)
        return 1
    finally:
        elapsed = time.perf_counter() - start_time
        processed = pipeline.frames_processed
        fps = processed / elapsed if elapsed > 0 else 0.0

        input_handler.release()
        output_handler.finalize()

        logger.info(
            "Processing finished. Frames read: %d, processed: %d, skipped: %d. "
            "Avg FPS: %.2f.",
            frames_read, processed, skipped, fps,
        )

    return 0
