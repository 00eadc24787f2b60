from .interface import Ini, classify_line
from .args import Parameters, FormatOptions
from .entities import (
    BlankLine,
    BlankLinePadding,
    Comment,
    CommentPadding,
    Property,
    PropertyPadding,
    Section,
    SectionPadding,
)
from .globals import VALID_MARKERS
