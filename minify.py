#!/usr/bin/env python3
"""Command-line entry point for mirroring and minifying web assets."""

import sys
import logging
import argparse

import colorlog

from asset_config import get_log_level, load_config
from asset_errors import AssetPipelineError
from pipeline import run

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(log_color)s%(asctime)s - %(levelname)s - %(message)s"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def configure_logging(level=None):
    """Install a colored console handler on the root logger and return it."""
    level = level or get_log_level()
    handler = colorlog.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(LOG_FORMAT, log_colors=LOG_COLORS))

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.addHandler(handler)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    return root


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Mirror an asset directory with minified web files")
    parser.add_argument("source", nargs="?", help="asset directory (default: 'source' from the config file)")
    parser.add_argument("--out-dir", help="destination root (default: $OUT_DIR)")
    parser.add_argument(
        "--passthrough",
        action="append",
        default=[],
        metavar="EXT",
        help="copy files ending with EXT unchanged (repeatable)",
    )
    parser.add_argument(
        "--no-mangle",
        action="append",
        default=[],
        metavar="FILE",
        help="do not mangle the JavaScript file named FILE (repeatable)",
    )
    parser.add_argument(
        "--jsmin-fallback",
        action="store_true",
        help="minify JavaScript with jsmin (no compression or mangling) when uglifyjs is missing",
    )
    parser.add_argument("--config", help="path to a JSON config file (default: assets.json)")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    """Run the asset pipeline and return a process exit code."""
    args = parse_arguments(argv)
    configure_logging("DEBUG" if args.debug else None)

    try:
        config = load_config(args.config)
        source = args.source or config["source"]
        run(
            source,
            passthrough_extensions=config["passthrough_extensions"] + args.passthrough,
            no_mangle=config["no_mangle"] + args.no_mangle,
            out_dir=args.out_dir,
            jsmin_fallback=args.jsmin_fallback or config["jsmin_fallback"],
        )
    except AssetPipelineError as e:
        logger.error("Asset pipeline failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
