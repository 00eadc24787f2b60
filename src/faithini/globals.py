from typing import Literal

DEFAULT_COMMENT_PREFIXES = (";", "#")
DEFAULT_OPTION_DELIMITER = "="
SECTION_OPENER = "["
SECTION_CLOSER = "]"
CANONICAL_SEPARATOR = " "
"""Spacing used around delimiters and after comment prefixes when formatting."""
VALID_MARKERS = Literal[
    "\\",
    "!",
    '"',
    "§",
    "%",
    "&",
    "/",
    "(",
    ")",
    "?",
    ":",
    ";",
    "#",
    "'",
    "*",
    ">",
    "<",
    "=",
]
"""Valid characters for markers (option delimiter or comment prefix)."""
