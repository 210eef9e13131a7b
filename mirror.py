"""
Recursive directory mirroring for web assets.

Recreates a source tree under a destination directory, minifying web files
and copying passthrough files at the same relative paths.
"""

import shutil
import logging
from dataclasses import dataclass
from pathlib import Path

from asset_config import PipelineConfig
from asset_errors import FilesystemError
from classifier import FileVerdict, classify
from transforms import decode_text, get_transform

logger = logging.getLogger(__name__)


@dataclass
class MirrorStats:
    """Counts of what a walk produced."""

    directories: int = 0
    minified: int = 0
    copied: int = 0
    ignored: int = 0

    def merge(self, other: "MirrorStats") -> None:
        self.directories += other.directories
        self.minified += other.minified
        self.copied += other.copied
        self.ignored += other.ignored


def handle_file(file, dest_dir, config: PipelineConfig) -> FileVerdict:
    """
    Classify one file and write its output into ``dest_dir``.

    Args:
        file: Source file path
        dest_dir: Existing destination directory
        config: Settings for the current run

    Returns:
        FileVerdict: The verdict that was applied
    """
    file = Path(file)
    out = Path(dest_dir) / file.name
    verdict = classify(file.name, config)

    if verdict is FileVerdict.IGNORE:
        logger.debug("Ignored %s", file)
        return verdict

    if verdict is FileVerdict.PASSTHROUGH:
        try:
            shutil.copyfile(file, out)
        except OSError as e:
            raise FilesystemError(f"Failed to copy file to {out} ({e})", file) from e
        logger.debug("Copied %s", file)
        return verdict

    try:
        data = file.read_bytes()
    except OSError as e:
        raise FilesystemError(f"Failed to read file ({e})", file) from e

    transform = get_transform(
        verdict,
        mangle=not config.is_mangle_exempt(file.name),
        jsmin_fallback=config.jsmin_fallback,
    )
    minified = transform(str(file), decode_text(str(file), data))

    try:
        out.write_text(minified, encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Failed to write minified file ({e})", out) from e
    logger.debug("Minified %s (%d -> %d bytes)", file, len(data), len(minified.encode("utf-8")))
    return verdict


def mirror(source_dir, dest_dir, config: PipelineConfig) -> MirrorStats:
    """
    Mirror ``source_dir`` into ``dest_dir``.

    ``dest_dir`` and any missing parents are created before its entries are
    processed. Subdirectories are mirrored at the same relative path, even
    when they contain nothing to output. Existing output files are
    overwritten. Symbolic links are skipped.

    Raises:
        FilesystemError: On any unreadable source or unwritable destination
        ContentError: If a web file cannot be decoded or minified
    """
    source_dir = Path(source_dir)
    dest_dir = Path(dest_dir)
    stats = MirrorStats()

    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Failed to create directory ({e})", dest_dir) from e
    stats.directories += 1

    try:
        entries = sorted(source_dir.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise FilesystemError(f"Failed to read files of directory ({e})", source_dir) from e

    for entry in entries:
        if entry.is_symlink():
            logger.debug("Skipped symbolic link %s", entry)
            continue
        if entry.is_dir():
            stats.merge(mirror(entry, dest_dir / entry.name, config))
        elif entry.is_file():
            verdict = handle_file(entry, dest_dir, config)
            if verdict is FileVerdict.IGNORE:
                stats.ignored += 1
            elif verdict is FileVerdict.PASSTHROUGH:
                stats.copied += 1
            else:
                stats.minified += 1

    return stats
