"""Common literal values used across playground_pages.

Manifest filenames and defaults live here so the config loader, the page
loader, and tests agree on them.

Examples
--------
>>> from playground_pages import _constants
>>> _constants.PAGE_BUNDLE_SUFFIX
'.xcplaygroundpage'
>>> _constants.OUTPUT_EXTENSIONS["text"]
'txt'
"""

BOOK_MANIFEST = "book.yaml"
PLAYGROUND_MANIFEST = "contents.xcplayground"
PAGE_BUNDLE_SUFFIX = ".xcplaygroundpage"
PAGE_BUNDLE_CONTENTS = "Contents"
INDEX_SLUG = "index"

DEFAULT_LANGUAGE = "swift"
DEFAULT_SYNTAX = "playground"
DEFAULT_FORMAT = "html"
DEFAULT_PYGMENTS_STYLE = "monokai"
DEFAULT_PAGES_DIR = "Pages"

OUTPUT_EXTENSIONS: dict[str, str] = {"html": "html", "text": "txt"}
