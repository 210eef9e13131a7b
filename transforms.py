"""Per-type minification adapters.

Each adapter takes the source path and its text and returns the minified
text. Failures are re-raised as :class:`ContentError` naming the file.
"""

import subprocess
import shutil
import logging

import tinycss2
from tinycss2.ast import ParseError
from cssmin import cssmin
from jsmin import jsmin
import minify_html

from asset_errors import ConfigurationError, ContentError
from classifier import FileVerdict

logger = logging.getLogger(__name__)

UGLIFY_EXECUTABLE = "uglifyjs"


def _has_uglify():
    return shutil.which(UGLIFY_EXECUTABLE) is not None


def decode_text(path, data: bytes) -> str:
    """Decode file contents as UTF-8, raising ContentError for binary data."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ContentError(f"File is not valid UTF-8 text ({e.reason} at byte {e.start})", path) from e


def _find_parse_error(nodes):
    """Return the first tinycss2 ParseError found in ``nodes`` or their children."""
    for node in nodes or ():
        if isinstance(node, ParseError):
            return node
        for children in (
            getattr(node, "prelude", None),
            getattr(node, "content", None),
            getattr(node, "arguments", None),
        ):
            if isinstance(children, list):
                error = _find_parse_error(children)
                if error is not None:
                    return error
    return None


def check_css(path, content: str) -> None:
    """
    Parse a stylesheet and raise ContentError if it is malformed.

    Unmatched closing brackets, bad strings or urls and rules without a
    block are reported by tinycss2 as ParseError nodes. Unclosed blocks are
    silently closed at end of input by the parser, so a trailing ``}`` is
    appended: it must come back as an unmatched bracket, otherwise something
    (a block, string or comment) was left open.
    """
    rules = tinycss2.parse_stylesheet(content, skip_comments=True, skip_whitespace=True)
    error = _find_parse_error(rules)
    if error is not None:
        raise ContentError(
            f"Invalid CSS file, cannot parse it: {error.message} at line {error.source_line}, "
            f"column {error.source_column}",
            path,
        )

    values = tinycss2.parse_component_value_list(content + "}", skip_comments=False)
    if not values or not isinstance(values[-1], ParseError):
        raise ContentError("Invalid CSS file, cannot parse it: unclosed block, string or comment", path)


def minify_css(path, content: str) -> str:
    """Validate a stylesheet with tinycss2, then minify it using cssmin."""
    check_css(path, content)
    try:
        return cssmin(content)
    except Exception as e:
        raise ContentError(f"Cannot minify CSS file ({e})", path) from e


def minify_js(path, content: str, mangle: bool = True, jsmin_fallback: bool = False) -> str:
    """
    Compress a script with uglify-js, shortening local identifiers if ``mangle``.

    Top-level names are left alone since scripts share the page's global
    scope. A missing uglify-js is a configuration error unless
    ``jsmin_fallback`` is set, in which case the script is only stripped of
    comments and whitespace with jsmin.

    Raises:
        ConfigurationError: If uglifyjs is not installed and no fallback is allowed
        ContentError: If uglifyjs rejects the script
    """
    if not _has_uglify():
        if not jsmin_fallback:
            raise ConfigurationError(
                f"{UGLIFY_EXECUTABLE} not found on PATH (install uglify-js or enable the jsmin fallback)", path
            )
        logger.warning("uglifyjs not found, %s minified with jsmin only (no compression or mangling)", path)
        try:
            return jsmin(content)
        except Exception as e:
            raise ContentError(f"Cannot minify JS file ({e})", path) from e

    cmd = [UGLIFY_EXECUTABLE, "--compress"]
    if mangle:
        cmd.append("--mangle")
    try:
        result = subprocess.run(cmd, input=content, capture_output=True, encoding="utf-8", check=True)
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise ContentError(f"Invalid JS file, cannot minify it: {detail}", path) from e
    except OSError as e:
        raise ContentError(f"Failed to run {UGLIFY_EXECUTABLE} ({e})", path) from e
    return result.stdout


def minify_html_document(path, content: str) -> str:
    """Remove insignificant whitespace from an HTML document.

    Inline ``<script>`` and ``<style>`` bodies are kept as written.
    """
    try:
        return minify_html.minify(content, minify_js=False, minify_css=False)
    except Exception as e:
        raise ContentError(f"Failed to minify HTML file ({e})", path) from e


def get_transform(verdict: FileVerdict, mangle: bool = True, jsmin_fallback: bool = False):
    """
    Return the adapter for a minify verdict as a ``transform(path, content)`` callable.

    Raises:
        ValueError: If ``verdict`` is not one of the minify verdicts
    """
    if verdict is FileVerdict.CSS:
        return minify_css
    if verdict is FileVerdict.JS:
        return lambda path, content: minify_js(path, content, mangle=mangle, jsmin_fallback=jsmin_fallback)
    if verdict is FileVerdict.HTML:
        return minify_html_document
    raise ValueError(f"No transform for verdict {verdict.name}")


__all__ = ["decode_text", "check_css", "minify_css", "minify_js", "minify_html_document", "get_transform"]
