"""File classification for the asset mirror."""

from enum import Enum

from asset_config import PipelineConfig


class FileVerdict(Enum):
    """How the walker handles a single file."""

    PASSTHROUGH = "passthrough"
    CSS = "css"
    JS = "js"
    HTML = "html"
    IGNORE = "ignore"

    @property
    def is_minified(self) -> bool:
        return self in (FileVerdict.CSS, FileVerdict.JS, FileVerdict.HTML)


# Built-in web file rules, checked in order after the passthrough list
WEB_FILE_SUFFIXES = (
    (".css", FileVerdict.CSS),
    (".js", FileVerdict.JS),
    (".html", FileVerdict.HTML),
)


def classify(filename: str, config: PipelineConfig) -> FileVerdict:
    """
    Decide what to do with a file based on its name.

    Passthrough extensions take precedence over the built-in web file rules,
    so a project can copy ``.css``, ``.js`` or ``.html`` files untouched.

    Args:
        filename: Name of the file (the last path component)
        config: Settings for the current run

    Returns:
        FileVerdict: The handling path for the file
    """
    if config.is_passthrough_extension(filename):
        return FileVerdict.PASSTHROUGH

    for suffix, verdict in WEB_FILE_SUFFIXES:
        if filename.endswith(suffix):
            return verdict

    return FileVerdict.IGNORE
