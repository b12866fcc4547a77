"""Common literal values used across sitecascade.

These constants keep special filenames, the filename date grammar and the
component side-output defaults centralized so the walker, loaders and tests
import the same values without drifting.

Examples
--------
>>> from sitecascade import _constants
>>> _constants.DATE_PREFIX_PATTERN.match("2024-01-02_hello").group("slug")
'hello'
>>> _constants.COMPONENTS_DIR
'_components'
"""

from __future__ import annotations

import re

DATA_NAME = "_data"
COMPONENTS_DIR = "_components"
RESERVED_PREFIXES = (".", "_")
REMOTE_FLAG = "remote"

DATE_PREFIX_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:-(?P<hour>\d{2})-(?P<minute>\d{2})(?:-(?P<second>\d{2}))?)?"
    r"[_-](?P<slug>.*)",
    re.ASCII,
)

GIT_LAST_MODIFIED = "git last modified"
GIT_CREATED = "git created"

DEFAULT_COMPONENTS_VARIABLE = "comp"
DEFAULT_COMPONENTS_CSS_FILE = "/components.css"
DEFAULT_COMPONENTS_JS_FILE = "/components.js"

EXTRA_CODE_STYLE = "style"
EXTRA_CODE_SCRIPT = "script"
