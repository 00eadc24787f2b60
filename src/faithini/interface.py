"""Interface classes exist for coder interaction: loading, editing, formatting and
writing an ini while keeping its layout."""

from typing import (
    Any,
    AsyncIterator,
    Iterable,
    Iterator,
    TextIO,
    assert_never,
)
from pathlib import Path
import asyncio
import contextlib
import inspect
import io
import logging
import warnings
import weakref
from charset_normalizer import from_bytes as read_from_bytes
from .exceptions_warnings import (
    DuplicateEntityError,
    ExtractionError,
    IniStructureError,
    IniStructureWarning,
    InvalidArgumentError,
    MalformedLineError,
)
from .entities import (
    BlankLine,
    Comment,
    IniItem,
    MinorItem,
    Property,
    Section,
)
from .args import FormatOptions, Parameters
from .utils import KeyedList

logger = logging.getLogger(__name__)


def classify_line(
    line: str, parameters: Parameters, line_number: int | None = None
) -> IniItem:
    """Interpret one line (without line terminator) as an ini entity.

    Blank lines take precedence over comments, comments over section names and
    section names over properties.

    Args:
        line (str): The line to interpret.
        parameters (Parameters): Markers and malformed line policy to use.
        line_number (int | None, optional): 1-based position of the line, used for
            error messages and warnings. Defaults to None.

    Raises:
        MalformedLineError: If the line is none of the entities and
            parameters.malformed_lines is "strict".

    Returns:
        IniItem: The entity the line represents.
    """
    with contextlib.suppress(ExtractionError):
        return BlankLine.from_string(line)
    with contextlib.suppress(ExtractionError):
        return Comment.from_string(line, parameters.comment_prefixes)
    with contextlib.suppress(ExtractionError):
        return Section.from_string(line, parameters.case_sensitive)
    with contextlib.suppress(ExtractionError):
        return Property.from_string(line, parameters.option_delimiters)

    match parameters.malformed_lines:
        case "comment":
            warnings.warn(
                f"Line {line_number} is kept as opaque comment because it's invalid: {line!r}",
                IniStructureWarning,
            )
            return Comment.opaque(line)
        case "strict":
            raise MalformedLineError(
                f"{line!r} is neither a comment, section name nor property.",
                line_number,
            )
        case _:
            assert_never(parameters.malformed_lines)


class Ini:
    """In-memory representation of an ini that keeps comments, blank lines and
    whitespace. An ordered collection of Sections with unique names plus the
    comments and blank lines following the last section."""

    def __init__(self, parameters: Parameters | None = None, **kwargs) -> None:
        """
        Args:
            parameters (Parameters | None, optional): Parameters for reading and
                comparing names. Parameters can also be passed as kwargs, which
                override those of parameters. Defaults to None (default Parameters).
            **kwargs (optional): Parameters as kwargs. See doc of Parameters for details.
        """
        self.parameters = parameters.copy() if parameters is not None else Parameters()
        if kwargs:
            self.parameters.update(**kwargs)
        self._sections: KeyedList[Section] = KeyedList(self.parameters.case_sensitive)
        self.trailing: list[MinorItem] = []
        """Comments and blank lines after the last property."""

    # ----------
    # loading
    # ----------

    @classmethod
    def from_lines(
        cls, lines: Iterable[str], parameters: Parameters | None = None, **kwargs
    ) -> "Ini":
        """Create an Ini from lines without line terminators.

        Raises:
            IniStructureError: If a property comes before any section.
            MalformedLineError: If a line can't be interpreted (strict policy).
            DuplicateEntityError: If a section or a property of a section repeats.

        Returns:
            Ini: The loaded Ini. Nothing is returned if reading fails.
        """
        ini = cls(parameters, **kwargs)
        _ReadIni(ini, lines)
        logger.debug(
            "Loaded ini with %d sections and %d trailing items.",
            len(ini),
            len(ini.trailing),
        )
        return ini

    @classmethod
    def from_string(
        cls, content: str, parameters: Parameters | None = None, **kwargs
    ) -> "Ini":
        """Create an Ini from ini content. Lines may end with "\\n", "\\r\\n" or "\\r".

        Line endings aren't stored, so content renders back byte-identically only if
        every line, the last included, ends with "\\n". See Ini.from_lines for raised
        errors.
        """
        return cls.from_stream(io.StringIO(content, newline=None), parameters, **kwargs)

    @classmethod
    def from_stream(
        cls, stream: TextIO, parameters: Parameters | None = None, **kwargs
    ) -> "Ini":
        """Create an Ini from a readable text stream.

        Raises:
            InvalidArgumentError: If stream is None or not readable.

        See Ini.from_lines for further raised errors.
        """
        if stream is None:
            raise InvalidArgumentError("A stream to read from is required.")
        if not stream.readable():
            raise InvalidArgumentError("Cannot read from the specified stream.")
        return cls.from_lines(
            (line.removesuffix("\n").removesuffix("\r") for line in stream),
            parameters,
            **kwargs,
        )

    @classmethod
    def read(
        cls,
        path: str | Path,
        parameters: Parameters | None = None,
        encoding: str | None = None,
        **kwargs,
    ) -> "Ini":
        """Read an INI file.

        Args:
            path (str | Path): Path to the INI file.
            parameters (Parameters | None, optional): Parameters for reading.
                Defaults to None.
            encoding (str | None, optional): Encoding of the file. If None, the
                encoding is detected. Defaults to None.
            **kwargs (optional): Parameters as kwargs. See doc of Parameters for details.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            InvalidArgumentError: If the encoding of the file can't be detected.

        See Ini.from_lines for further raised errors.
        """
        if path is None:
            raise InvalidArgumentError("A path to read from is required.")
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"INI file '{path}' does not exist.")

        raw = path.read_bytes()
        if encoding is not None:
            content = raw.decode(encoding)
        elif not raw:
            content = ""
        elif (best := read_from_bytes(raw).best()) is not None:
            content = str(best)
        else:
            raise InvalidArgumentError(f"Could not detect the encoding of '{path}'.")

        return cls.from_string(content, parameters, **kwargs)

    # ----------
    # section access
    # ----------

    def __getitem__(self, key: str | int) -> Section:
        return self._sections[key]

    def __contains__(self, key: object) -> bool:
        return key in self._sections

    def __iter__(self) -> Iterator[Section]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Ini(sections={self._sections.names()!r})"

    @property
    def sections(self) -> list[Section]:
        """The sections in order (a copy)."""
        return list(self._sections)

    def keys(self) -> list[str]:
        return self._sections.names()

    def index(self, name: str) -> int:
        """Position of a section."""
        return self._sections.index(name)

    def get_section(self, name: str, default: Any = None) -> Section | Any:
        return self._sections.get(name, default)

    def add_section(self, section: Section | str, index: int | None = None) -> Section:
        """Add a section.

        Args:
            section (Section | str): A Section or the name of a new one.
            index (int | None, optional): Position to insert at. Appends if None.
                Defaults to None.

        Raises:
            DuplicateEntityError: If a section with an equal name already exists.
                Also if the Section holds properties whose keys collide under this
                Ini's case policy.
            ValueError: If the Section already belongs to another Ini.

        Returns:
            Section: The added section.
        """
        if isinstance(section, str):
            section = Section(section, case_sensitive=self.parameters.case_sensitive)
        elif section.ini is not None:
            raise ValueError(f"Section '{section.name}' already belongs to an Ini.")
        if section.name in self._sections:
            raise DuplicateEntityError(
                f"Section '{section.name}' already exists.", key=section.name
            )
        section._set_case_sensitive(self.parameters.case_sensitive)
        self._sections.insert(section, index)
        section._ini = weakref.ref(self)
        return section

    def remove_section(self, name: str, keep_decoration: bool = False) -> Section:
        """Remove a section and its properties.

        Args:
            name (str): Name of the section.
            keep_decoration (bool, optional): Whether to hand the comments and blank
                lines above the section header to the next section (or the trailing
                items if it's the last one). Defaults to False.

        Raises:
            EntityNotFound: If the section doesn't exist.

        Returns:
            Section: The removed section.
        """
        index = self._sections.index(name)
        section = self._sections.pop(name)
        if keep_decoration:
            self._following_decoration(index)[0:0] = section.decoration
            section.decoration = []
        section._ini = None
        return section

    def _following_decoration(self, index: int) -> list[MinorItem]:
        """Decoration list of the section at index or the trailing items if there
        is none."""
        if index < len(self._sections):
            return self._sections[index].decoration
        return self.trailing

    # ----------
    # formatting
    # ----------

    def format(self, options: FormatOptions | None = None) -> None:
        """Reset all padding and apply formatting rules. Names, values and order are
        not touched. Formatting twice with the same options equals formatting once.

        Args:
            options (FormatOptions | None, optional): Rules for formatting. Defaults to
                None (FormatOptions.DEFAULT).
        """
        options = options or FormatOptions.DEFAULT

        for s, section in enumerate(self._sections):
            _reset_padding(section.decoration)
            if options.ensure_blank_line_between_sections and s > 0:
                _ensure_leading_blank_line(section.decoration)
            section.padding.reset()

            for p, prop in enumerate(section):
                _reset_padding(prop.decoration)
                if options.ensure_blank_line_between_properties and p > 0:
                    _ensure_leading_blank_line(prop.decoration)
                prop.padding.reset()

        # remove trailing blank lines, comments stay
        while self.trailing and isinstance(self.trailing[-1], BlankLine):
            self.trailing.pop()
        _reset_padding(self.trailing)

        logger.debug("Formatted ini with %s.", options)

    # ----------
    # writing
    # ----------

    def iter_lines(self) -> Iterator[str]:
        """Generate the ini content line by line (without line terminators).

        Every call starts a new pass over the current content.
        """
        for section in self._sections:
            yield from (item.to_string() for item in section.decoration)
            yield section.to_string()
            for prop in section:
                yield from (item.to_string() for item in prop.decoration)
                yield prop.to_string()
        yield from (item.to_string() for item in self.trailing)

    async def aiter_lines(self) -> AsyncIterator[str]:
        """Asynchronous counterpart of Ini.iter_lines. Yields control to the event
        loop between lines."""
        for line in self.iter_lines():
            yield line
            await asyncio.sleep(0)

    def to_string(self, newline: str = "\n") -> str:
        """Convert the Ini into ini content. Every line, the last included, ends with
        newline. An empty Ini gives an empty string. Line endings of the read content
        aren't kept, a missing final terminator is added."""
        return "".join(f"{line}{newline}" for line in self.iter_lines())

    def __str__(self) -> str:
        return self.to_string()

    def write(self, stream: TextIO, newline: str = "\n") -> None:
        """Write the ini content to a writable text stream.

        Raises:
            InvalidArgumentError: If stream is None or not writable.
        """
        _verify_writable(stream)
        for line in self.iter_lines():
            stream.write(f"{line}{newline}")
        stream.flush()

    async def write_async(self, stream: Any, newline: str = "\n") -> None:
        """Write the ini content to a stream asynchronously, line by line.

        Args:
            stream (Any): Destination with a write method. The result of write is
                awaited if awaitable. If the stream has a drain coroutine (e.g.
                asyncio.StreamWriter), it is awaited at the end.
            newline (str, optional): Line terminator. Defaults to "\\n".

        Raises:
            InvalidArgumentError: If stream is None or not writable.
        """
        _verify_writable(stream)
        async for line in self.aiter_lines():
            result = stream.write(f"{line}{newline}")
            if inspect.isawaitable(result):
                await result
        if (drain := getattr(stream, "drain", None)) is not None:
            await drain()

    def save(
        self, path: str | Path, encoding: str = "utf-8", newline: str = "\n"
    ) -> None:
        """Save the ini content to a file.

        Args:
            path (str | Path): Path of the file to write to.
            encoding (str, optional): Encoding to use. Defaults to "utf-8".
            newline (str, optional): Line terminator, written untranslated.
                Defaults to "\\n".
        """
        if path is None:
            raise InvalidArgumentError("A path to save to is required.")
        with open(path, "w", encoding=encoding, newline="") as f:
            self.write(f, newline)
        logger.debug("Saved ini to '%s'.", path)


class _ReadIni:

    def __init__(self, target: Ini, lines: Iterable[str]) -> None:
        """Read lines into target: comments and blank lines are attached to the next
        section or property, or to the trailing items if none follows."""
        self.target = target
        self.parameters = target.parameters

        # ----
        # define variables for read process
        # ----
        self.current_section: Section | None = None
        self.pending: list[MinorItem] = []
        self.current_line_number: int = 0
        # ----

        for self.current_line_number, line in enumerate(lines, start=1):
            item = classify_line(line, self.parameters, self.current_line_number)
            match item:
                case BlankLine() | Comment():
                    self.pending.append(item)
                case Section():
                    self._handle_section(item)
                case Property():
                    self._handle_property(item)
                case _:
                    assert_never(item)

        if self.pending:
            self.target.trailing.extend(self._take_pending())

    def _take_pending(self) -> list[MinorItem]:
        pending, self.pending = self.pending, []
        return pending

    def _handle_section(self, section: Section) -> None:
        section.decoration.extend(self._take_pending())
        try:
            self.target.add_section(section)
        except DuplicateEntityError as e:
            raise DuplicateEntityError(
                f"Line {self.current_line_number}: Section '{section.name}' already exists.",
                key=section.name,
            ) from e
        self.current_section = section

    def _handle_property(self, prop: Property) -> None:
        if self.current_section is None:
            raise IniStructureError(
                f"Property '{prop.name}' is not in a section.",
                self.current_line_number,
            )
        prop.decoration.extend(self._take_pending())
        try:
            self.current_section.add_property(prop)
        except DuplicateEntityError as e:
            raise DuplicateEntityError(
                f"Line {self.current_line_number}: Property '{prop.name}' already exists"
                f" in section '{self.current_section.name}'.",
                key=prop.name,
            ) from e


def _reset_padding(items: list[MinorItem]) -> None:
    for item in items:
        match item:
            case BlankLine() | Comment():
                item.padding.reset()
            case _:
                assert_never(item)


def _ensure_leading_blank_line(items: list[MinorItem]) -> None:
    if not items or not isinstance(items[0], BlankLine):
        items.insert(0, BlankLine())


def _verify_writable(stream: Any) -> None:
    if stream is None:
        raise InvalidArgumentError("A stream to write to is required.")
    writable = getattr(stream, "writable", None)
    if writable is not None and not writable():
        raise InvalidArgumentError("Cannot write to the specified stream.")
