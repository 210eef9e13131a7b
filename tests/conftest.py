import sys
import shutil
from pathlib import Path

import pytest

# Ensure project root is on sys.path so tests can import modules
ROOT_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT_DIR))


@pytest.fixture
def uglify():
    """Path of the uglifyjs executable; tests using it fail when it is missing."""
    path = shutil.which("uglifyjs")
    if path is None:
        pytest.fail("uglifyjs is required for JavaScript minification tests (npm install -g uglify-js)")
    return path


def write_tree(root, files):
    """Create ``files`` (relative path -> str or bytes) under ``root``."""
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


def list_tree(root):
    """Return the sorted relative paths of every entry under ``root``."""
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*"))


CSS_SOURCE = """
/* Page layout */
body {
    margin: 0px;
    color: #ffffff;
}

.empty {
}
"""

JS_SOURCE = """
// Greeting helper
function greet(firstName, lastName) {
    var fullName = firstName + " " + lastName;
    return "Hello, " + fullName;
}
"""

HTML_SOURCE = """<!DOCTYPE html>
<html>
  <head>
    <title>  Example  </title>
  </head>
  <body>
    <p>
      Hello   world
    </p>
  </body>
</html>
"""

BINARY_SOURCE = bytes(range(256))


@pytest.fixture
def asset_tree(tmp_path):
    """Source tree with one file of each kind plus an unrelated file."""
    return write_tree(
        tmp_path / "assets",
        {
            "a.css": CSS_SOURCE,
            "a.js": JS_SOURCE,
            "a.html": HTML_SOURCE,
            "sub/b.bin": BINARY_SOURCE,
            "sub/notes.txt": "not included",
        },
    )
