"""
Build-time entry point for the asset pipeline.

Call :func:`run` once per build to mirror an asset directory into the
output directory with web files minified.
"""

import logging
from pathlib import Path

from asset_config import PipelineConfig, get_out_dir
from asset_errors import FilesystemError
from mirror import mirror

logger = logging.getLogger(__name__)

REBUILD_TRIGGER_PREFIX = "rerun-if-changed="


def emit_rebuild_trigger(source_path, emit=print):
    """Declare that the build must run again when ``source_path`` changes."""
    emit(f"{REBUILD_TRIGGER_PREFIX}{source_path}")


def run(
    source_path,
    passthrough_extensions=(),
    no_mangle=(),
    out_dir=None,
    rebuild_trigger=print,
    jsmin_fallback=False,
):
    """
    Copy assets (web files and whitelisted binaries) into the output directory.

    By default only files ending with ``.html``, ``.js`` or ``.css`` are
    included, minified. Files ending with one of ``passthrough_extensions``
    are copied without modification, even if they are web files. JavaScript
    files are also mangled (local identifiers shortened); list a script's
    filename in ``no_mangle`` if that breaks it.

    The source directory itself is mirrored into the output directory, so
    ``assets/app.js`` ends up at ``<OUT_DIR>/assets/app.js``.

    Args:
        source_path: Path to the asset directory
        passthrough_extensions: Filename endings to copy unchanged
        no_mangle: JavaScript filenames that must not be mangled
        out_dir: Destination root, defaults to the ``OUT_DIR`` env variable
        rebuild_trigger: Callable receiving the rebuild declaration line
        jsmin_fallback: Minify scripts with jsmin when uglifyjs is missing
            instead of failing (no compression or mangling)

    Raises:
        AssetPipelineError: Any configuration, filesystem or content error
    """
    config = PipelineConfig.create(passthrough_extensions, no_mangle, jsmin_fallback=jsmin_fallback)
    out_root = Path(get_out_dir(out_dir))

    source = Path(source_path)
    if not source.is_dir():
        raise FilesystemError("Asset directory not found", source)

    name = source.resolve().name
    if not name:
        raise FilesystemError("Asset directory has no name to mirror under the output directory", source)
    dest = out_root / name
    logger.info("Mirroring %s into %s", source, dest)
    stats = mirror(source, dest, config)
    logger.info(
        "✓ Asset mirroring completed: %d minified, %d copied, %d ignored, %d directories",
        stats.minified,
        stats.copied,
        stats.ignored,
        stats.directories,
    )

    emit_rebuild_trigger(source_path, rebuild_trigger)
