"""faithini-specific exceptions and warnings"""

# ---------- #
# Exceptions
# ---------- #


class IniError(Exception):
    """Base class for errors raised while loading or editing an ini."""


class _LineError(IniError):
    """An error tied to a position in the ini content."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        """
        Args:
            message (str): The error message.
            line_number (int | None, optional): 1-based line of the offending
                content. Defaults to None.
        """
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class IniStructureError(_LineError):
    """Raised when the ini violates its structure (e.g. a property outside of any
    section)."""


class MalformedLineError(_LineError):
    """Raised when a line can't be interpreted as any ini entity."""


class DuplicateEntityError(IniError):
    """Raised when entities are tried to be created that already exist."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class EntityNotFound(IniError, KeyError):
    """Raised when an entity was to be accessed but doesn't exist."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class InvalidArgumentError(IniError, ValueError):
    """Raised when a load or save source/destination is missing or unusable."""


class ExtractionError(Exception):
    """Raised when an entity could not be extracted."""


# ---------- #
# Warnings
# ---------- #


class IniStructureWarning(Warning):
    """Raised when the ini violates the defined structure."""
