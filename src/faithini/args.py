from typing import Literal, ClassVar
from dataclasses import dataclass
from .globals import (
    VALID_MARKERS,
    DEFAULT_COMMENT_PREFIXES,
    DEFAULT_OPTION_DELIMITER,
    SECTION_OPENER,
)

type MalformedLinePolicy = Literal["strict", "comment"]
"""How to treat a line that is neither blank, comment, section name nor option.
    "strict": Raise a MalformedLineError naming the line.
    "comment": Keep the line verbatim as an opaque comment and warn.
"""


class Parameters:
    """Parameters for reading."""

    def __init__(
        self,
        comment_prefixes: (
            VALID_MARKERS | tuple[VALID_MARKERS, ...]
        ) = DEFAULT_COMMENT_PREFIXES,
        option_delimiters: (
            VALID_MARKERS | tuple[VALID_MARKERS, ...]
        ) = DEFAULT_OPTION_DELIMITER,
        case_sensitive: bool = False,
        malformed_lines: MalformedLinePolicy = "strict",
    ) -> None:
        """
        Args:
            comment_prefixes (VALID_MARKERS | tuple[VALID_MARKERS,...], optional):
                Prefix character(s) that denote a comment. The prefix found is kept
                per comment, so every one of them survives a round trip.
                Defaults to (";", "#").
            option_delimiters (VALID_MARKERS | tuple[VALID_MARKERS,...], optional):
                Delimiter character(s) that delimit option keys from values. The
                earliest delimiter in a line wins. Defaults to "=".
            case_sensitive (bool, optional): Whether section names and option keys
                are compared case-sensitively. Defaults to False.
            malformed_lines ("strict" | "comment", optional): Policy for lines that
                can't be interpreted. Defaults to "strict".
        """
        # because comment_prefixes and option_delimiters check each other on setting
        self._comment_prefixes = ()
        self._option_delimiters = ()

        self.comment_prefixes = comment_prefixes
        self.option_delimiters = option_delimiters
        self.case_sensitive = case_sensitive
        self.malformed_lines = malformed_lines

    @property
    def comment_prefixes(self) -> tuple[VALID_MARKERS, ...]:
        return self._comment_prefixes

    @comment_prefixes.setter
    def comment_prefixes(
        self, value: VALID_MARKERS | tuple[VALID_MARKERS, ...]
    ) -> None:
        if not isinstance(value, tuple):
            value = (value,)
        self.verify_marker(value, "comment prefix")
        self._comment_prefixes = value
        self.verify_between_markers()

    @property
    def option_delimiters(self) -> tuple[VALID_MARKERS, ...]:
        return self._option_delimiters

    @option_delimiters.setter
    def option_delimiters(
        self, value: VALID_MARKERS | tuple[VALID_MARKERS, ...]
    ) -> None:
        if not isinstance(value, tuple):
            value = (value,)
        if not value:
            raise ValueError("At least one option delimiter is required.")
        self.verify_marker(value, "option delimiter")
        self._option_delimiters = value
        self.verify_between_markers()

    @property
    def malformed_lines(self) -> MalformedLinePolicy:
        return self._malformed_lines

    @malformed_lines.setter
    def malformed_lines(self, value: MalformedLinePolicy) -> None:
        if value not in {"strict", "comment"}:
            raise ValueError(
                f"malformed_lines must be 'strict' or 'comment', not {value!r}."
            )
        self._malformed_lines = value

    def verify_marker(self, marker: tuple[str, ...], name: str) -> None:
        for val in marker:
            if len(val) != 1 or val.isspace():
                raise ValueError(
                    f"A {name} must be a single non-whitespace character, not {val!r}."
                )
            if val == SECTION_OPENER:
                raise ValueError(
                    f"'[' (section name identifier) is not allowed as a {name}."
                )

    def verify_between_markers(self) -> None:
        if set(self.comment_prefixes).intersection(self.option_delimiters):
            raise ValueError(
                "Comment prefixes and option delimiters have to be distinct from each other."
            )

    def update(self, **kwargs) -> None:
        """Update parameters with kwargs

        Args:
            **kwargs: Keyword-arguments to update the parameters with.
        """
        for k, v in kwargs.items():
            if not hasattr(self, k):
                raise AttributeError(f"Unknown parameter '{k}'.")
            setattr(self, k, v)

    def copy(self) -> "Parameters":
        return Parameters(
            comment_prefixes=self.comment_prefixes,
            option_delimiters=self.option_delimiters,
            case_sensitive=self.case_sensitive,
            malformed_lines=self.malformed_lines,
        )


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """Rules for Ini.format.

    Args:
        ensure_blank_line_between_sections (bool): Whether every section but the
            first gets a blank line in front of its decoration. Defaults to True.
        ensure_blank_line_between_properties (bool): Whether every option but the
            first of a section gets a blank line in front of its decoration.
            Defaults to False.
    """

    DEFAULT: ClassVar["FormatOptions"]

    ensure_blank_line_between_sections: bool = True
    ensure_blank_line_between_properties: bool = False


FormatOptions.DEFAULT = FormatOptions()
