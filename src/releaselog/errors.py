"""Error kinds raised while extracting repository history."""

from __future__ import annotations

from typing import Optional


class HistoryError(Exception):
    """Base class for every failure surfaced by the extraction pipeline.

    ``subject`` names the entry that triggered the failure, either a commit id
    or a tag ref name, once it is known.
    """

    def __init__(self, message: str, subject: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.subject = subject

    def with_subject(self, subject: Optional[str]) -> "HistoryError":
        """Name ``subject`` as the failing entry.

        A different id the error already carried is kept in the message.
        """
        if subject is None:
            return self
        if self.subject is not None and self.subject != subject:
            self.message = f"{self.message} ({self.subject})"
        self.subject = subject
        return self

    def __str__(self) -> str:
        if self.subject:
            return f"{self.subject}: {self.message}"
        return self.message


class Utf8Error(HistoryError):
    """A text field is missing or is not valid UTF-8."""

    def __init__(self, field: str, subject: Optional[str] = None):
        super().__init__(f"{field} is not valid UTF-8", subject)
        self.field = field


class InvalidTag(HistoryError):
    """An annotated tag points at something other than a commit."""


class SemVerError(HistoryError):
    """A tag name does not parse as a semantic version."""


class RepositoryError(HistoryError):
    """The object database could not be read or is inconsistent."""
