"""Ini entities are either a section, a property, a comment or a blank line.

Every entity remembers how it was written (padding, comment prefix, delimiter), so
that rendering an untouched entity reproduces the line it was read from.
"""

from typing import Any, Self, TYPE_CHECKING
from dataclasses import dataclass
import re
import weakref
from .exceptions_warnings import ExtractionError
from .utils import KeyedList
from .globals import (
    CANONICAL_SEPARATOR,
    DEFAULT_COMMENT_PREFIXES,
    DEFAULT_OPTION_DELIMITER,
    SECTION_CLOSER,
    SECTION_OPENER,
)

if TYPE_CHECKING:
    from .interface import Ini

# ---------- #
# Padding
# ---------- #


@dataclass(slots=True)
class BlankLinePadding:
    """Whitespace of a blank line."""

    left: str = ""

    def reset(self) -> None:
        self.left = ""


@dataclass(slots=True)
class CommentPadding:
    """Whitespace around a comment.

    Args:
        left (str): Whitespace before the comment prefix.
        inside (str): Whitespace between prefix and text.
        right (str): Whitespace after the text.
    """

    left: str = ""
    inside: str = CANONICAL_SEPARATOR
    right: str = ""

    def reset(self) -> None:
        self.left = ""
        self.inside = CANONICAL_SEPARATOR
        self.right = ""


@dataclass(slots=True)
class SectionPadding:
    """Whitespace around a section header: `{left}[{inside_left}name{inside_right}]{right}`."""

    left: str = ""
    inside_left: str = ""
    inside_right: str = ""
    right: str = ""

    def reset(self) -> None:
        self.left = self.inside_left = self.inside_right = self.right = ""


@dataclass(slots=True)
class PropertyPadding:
    """Whitespace around a property: `{left}key{inside_left}={inside_right}value`.

    Whitespace after a value belongs to the value. Whitespace after the delimiter of
    a property without value is kept in right. New properties are spaced as
    `key = value`; reset removes all of it (`key=value`).
    """

    left: str = ""
    inside_left: str = CANONICAL_SEPARATOR
    inside_right: str = CANONICAL_SEPARATOR
    right: str = ""

    def reset(self) -> None:
        self.left = self.inside_left = self.inside_right = self.right = ""


def _split_whitespace(string: str) -> tuple[str, str, str]:
    """Split a string into leading whitespace, content and trailing whitespace."""
    content = string.strip()
    if not content:
        return string, "", ""
    start = len(string) - len(string.lstrip())
    end = len(string.rstrip())
    return string[:start], content, string[end:]


# ---------- #
# Minor items
# ---------- #


class BlankLine:
    """A line without content."""

    def __init__(self, padding: BlankLinePadding | None = None) -> None:
        self.padding = padding or BlankLinePadding()

    @classmethod
    def from_string(cls, string: str) -> Self:
        """Create a BlankLine from a line.

        Raises:
            ExtractionError: If the line has non-whitespace content.
        """
        if string.strip():
            raise ExtractionError("Blank line could not be extracted.")
        return cls(BlankLinePadding(left=string))

    def to_string(self) -> str:
        return self.padding.left

    def __repr__(self) -> str:
        return "BlankLine()"


class Comment:
    """Comment object holding a comment's content."""

    def __init__(
        self,
        text: str = "",
        prefix: str = DEFAULT_COMMENT_PREFIXES[0],
        padding: CommentPadding | None = None,
    ) -> None:
        """
        Args:
            text (str, optional): The comment text without prefix. Defaults to "".
            prefix (str, optional): The comment prefix. An empty prefix denotes an
                opaque line that is kept verbatim. Defaults to ";".
            padding (CommentPadding | None, optional): Whitespace around the comment.
                Defaults to canonical padding.
        """
        self.text = text
        self.prefix = prefix
        self.padding = padding or CommentPadding()

    @classmethod
    def from_string(cls, string: str, prefixes: tuple[str, ...]) -> Self:
        """Create a Comment from a line.

        Args:
            string (str): The line.
            prefixes (tuple[str, ...]): Prefixes that can denote a comment.

        Raises:
            ExtractionError: If the line doesn't start with one of the prefixes.
        """
        left, content, right = _split_whitespace(string)
        if not content or content[0] not in prefixes:
            raise ExtractionError("Comment could not be extracted.")
        inside, text, _ = _split_whitespace(content[1:])
        if not text:
            # all whitespace after the prefix is trailing
            inside, right = "", inside + right
        return cls(text, content[0], CommentPadding(left, inside, right))

    @classmethod
    def opaque(cls, string: str) -> Self:
        """Keep an uninterpretable line as a comment without prefix."""
        left, content, right = _split_whitespace(string)
        return cls(content, "", CommentPadding(left, "", right))

    def to_string(self) -> str:
        """Convert the Comment into an ini string."""
        inside = self.padding.inside if self.prefix and self.text else ""
        return (
            f"{self.padding.left}{self.prefix}{inside}{self.text}{self.padding.right}"
        )

    def __repr__(self) -> str:
        return f"Comment({self.text!r}, prefix={self.prefix!r})"


type MinorItem = Comment | BlankLine
"""Decoration: items that attach to the next section or property."""


# ---------- #
# Major items
# ---------- #


class Property:
    """Key/value pair of a section. The value is kept as raw text."""

    def __init__(
        self,
        name: str,
        value: str = "",
        delimiter: str = DEFAULT_OPTION_DELIMITER,
        padding: PropertyPadding | None = None,
        decoration: list[MinorItem] | None = None,
    ) -> None:
        """
        Args:
            name (str): The property key.
            value (str, optional): The raw value. Defaults to "".
            delimiter (str, optional): Character between key and value.
                Defaults to "=".
            padding (PropertyPadding | None, optional): Whitespace around key and
                delimiter. Defaults to `key = value` spacing.
            decoration (list[MinorItem] | None, optional): Comments and blank lines
                above the property. Defaults to None.
        """
        if not name or name != name.strip():
            raise ValueError(
                f"Property name must be non-empty without surrounding whitespace, got {name!r}."
            )
        self._name = name
        self.value = value
        self.delimiter = delimiter
        self.padding = padding or PropertyPadding()
        self.decoration: list[MinorItem] = decoration if decoration is not None else []
        self._section: weakref.ref[Section] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def section(self) -> "Section | None":
        """The section owning this property (if any)."""
        return self._section() if self._section is not None else None

    @classmethod
    def from_string(cls, string: str, delimiters: tuple[str, ...]) -> Self:
        """Create a Property from a line.

        Args:
            string (str): The line.
            delimiters (tuple[str, ...]): Characters that can separate key and value.
                The one occurring first in the line is used.

        Raises:
            ExtractionError: If there is no delimiter or no key in front of it.
        """
        match = re.search(f"[{''.join(re.escape(d) for d in delimiters)}]", string)
        if match is None:
            raise ExtractionError("Property could not be extracted.")
        left, name, inside_left = _split_whitespace(string[: match.start()])
        if not name:
            raise ExtractionError("Property could not be extracted (missing key).")
        rest = string[match.end() :]
        value = rest.lstrip()
        return cls(
            name=name,
            value=value,
            delimiter=match[0],
            padding=PropertyPadding(
                left=left,
                inside_left=inside_left,
                inside_right=rest[: len(rest) - len(value)] if value else "",
                right="" if value else rest,
            ),
        )

    def to_string(self) -> str:
        """Convert the Property into an ini string."""
        pad = self.padding
        value = f"{pad.inside_right}{self.value}" if self.value else pad.right
        return f"{pad.left}{self.name}{pad.inside_left}{self.delimiter}{value}"

    def __repr__(self) -> str:
        return f"Property({self.name!r}, {self.value!r})"


class Section:
    """A configuration section. Holds Properties in insertion order."""

    def __init__(
        self,
        name: str,
        padding: SectionPadding | None = None,
        decoration: list[MinorItem] | None = None,
        trailer: str = "",
        case_sensitive: bool = False,
    ) -> None:
        """
        Args:
            name (str): Name of the section.
            padding (SectionPadding | None, optional): Whitespace around the header.
                Defaults to None (no whitespace).
            decoration (list[MinorItem] | None, optional): Comments and blank lines
                above the header. Defaults to None.
            trailer (str, optional): Text following the closing bracket (e.g. an
                inline comment), kept verbatim. Defaults to "".
            case_sensitive (bool, optional): Whether property keys are compared
                case-sensitively. Adjusted to the document's policy when the section
                is added to an Ini. Defaults to False.
        """
        if not name or name != name.strip():
            raise ValueError(
                f"Section name must be non-empty without surrounding whitespace, got {name!r}."
            )
        self._name = name
        self.padding = padding or SectionPadding()
        self.decoration: list[MinorItem] = decoration if decoration is not None else []
        self.trailer = trailer
        self._properties: KeyedList[Property] = KeyedList(case_sensitive)
        self._ini: "weakref.ref[Ini] | None" = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def ini(self) -> "Ini | None":
        """The document owning this section (if any)."""
        return self._ini() if self._ini is not None else None

    @property
    def case_sensitive(self) -> bool:
        return self._properties.case_sensitive

    @classmethod
    def from_string(cls, string: str, case_sensitive: bool = False) -> Self:
        """Create a Section from a header line like `[name]`.

        Raises:
            ExtractionError: If the line is not a section header.
        """
        left, content, right = _split_whitespace(string)
        if not content.startswith(SECTION_OPENER) or (
            (closer := content.find(SECTION_CLOSER)) < 0
        ):
            raise ExtractionError(f"Could not extract section name from {string!r}")
        inside_left, name, inside_right = _split_whitespace(content[1:closer])
        if not name:
            raise ExtractionError(f"Could not extract section name from {string!r}")
        # anything after the closing bracket is kept verbatim, including its spacing
        after = content[closer + 1 :]
        return cls(
            name,
            padding=SectionPadding(
                left=left,
                inside_left=inside_left,
                inside_right=inside_right,
                right="" if after else right,
            ),
            trailer=after + right if after else "",
            case_sensitive=case_sensitive,
        )

    def to_string(self) -> str:
        """Convert the section header into an ini string."""
        pad = self.padding
        return (
            f"{pad.left}{SECTION_OPENER}{pad.inside_left}{self.name}"
            f"{pad.inside_right}{SECTION_CLOSER}{pad.right}{self.trailer}"
        )

    def _set_case_sensitive(self, case_sensitive: bool) -> None:
        """Rebuild the property index under another comparison policy."""
        if case_sensitive != self._properties.case_sensitive:
            self._properties = KeyedList(case_sensitive, self._properties)

    # ----------
    # property access
    # ----------

    def __getitem__(self, key: str | int) -> Property:
        return self._properties[key]

    def __contains__(self, key: object) -> bool:
        return key in self._properties

    def __iter__(self):
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Section({self.name!r}, properties={self._properties.names()!r})"

    @property
    def properties(self) -> list[Property]:
        """The properties in order (a copy)."""
        return list(self._properties)

    def keys(self) -> list[str]:
        return self._properties.names()

    def get_property(self, name: str, default: Any = None) -> Property | Any:
        return self._properties.get(name, default)

    def get_value(self, name: str, default: Any = None) -> str | Any:
        """Get the raw value of a property or default if it doesn't exist."""
        prop = self._properties.get(name)
        return default if prop is None else prop.value

    def set_value(self, name: str, value: str) -> Property:
        """Set the value of a property. Adds the property if it doesn't exist."""
        if (prop := self._properties.get(name)) is not None:
            prop.value = value
            return prop
        return self.add_property(name, value)

    def add_property(
        self,
        prop: Property | str,
        value: str = "",
        index: int | None = None,
    ) -> Property:
        """Add a property to the section.

        Args:
            prop (Property | str): A Property or the name of a new one.
            value (str, optional): Value of the new property. Ignored if prop is a
                Property. Defaults to "".
            index (int | None, optional): Position to insert at. Appends if None.
                Defaults to None.

        Raises:
            DuplicateEntityError: If a property with an equal key already exists.
            ValueError: If the Property already belongs to another section.

        Returns:
            Property: The added property.
        """
        if isinstance(prop, str):
            prop = Property(prop, value)
        elif prop.section is not None:
            raise ValueError(
                f"Property '{prop.name}' already belongs to section '{prop.section.name}'."
            )
        self._properties.insert(prop, index)
        prop._section = weakref.ref(self)
        return prop

    def remove_property(self, name: str, keep_decoration: bool = False) -> Property:
        """Remove a property from the section.

        Args:
            name (str): Key of the property.
            keep_decoration (bool, optional): Whether to hand the property's comments
                and blank lines to the item following it (next property, else next
                section, else the document's trailing items). If False they are
                removed together with the property. Defaults to False.

        Raises:
            EntityNotFound: If the property doesn't exist.
            ValueError: If decoration of the last property is to be kept but the
                section belongs to no Ini.

        Returns:
            Property: The removed property.
        """
        index = self._properties.index(name)
        if keep_decoration:
            self._following_decoration(index + 1)[0:0] = self[index].decoration
        prop = self._properties.pop(name)
        if keep_decoration:
            prop.decoration = []
        prop._section = None
        return prop

    def _following_decoration(self, index: int) -> list[MinorItem]:
        """Decoration list of the first major item at or after property index."""
        if index < len(self._properties):
            return self._properties[index].decoration
        if (ini := self.ini) is None:
            raise ValueError(
                f"Section '{self.name}' belongs to no Ini, decoration can't be kept."
            )
        return ini._following_decoration(ini.index(self.name) + 1)


type MajorItem = Section | Property
type IniItem = Section | Property | Comment | BlankLine
"""Every line of an ini is exactly one of these."""
