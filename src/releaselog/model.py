"""Typed records handed to the change log renderer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from semver import Version


@dataclass(frozen=True, slots=True)
class Signature:
    """Identity and instant of an author, committer or tagger."""

    name: str
    email: str
    time: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "email": self.email, "time": self.time.isoformat()}


@dataclass(frozen=True, slots=True)
class Commit:
    """A validated commit from the first-parent line.

    Attributes
    ----------
    id:
        Full hexadecimal object id.
    short_id:
        Shortest prefix of ``id`` that was unambiguous when the commit was
        read.
    message:
        Commit message with trailing whitespace removed.
    time:
        Committer timestamp as a UTC instant.
    """

    id: str
    short_id: str
    message: str
    time: datetime
    author: Signature
    committer: Signature

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "short_id": self.short_id,
            "message": self.message,
            "time": self.time.isoformat(),
            "author": self.author.to_dict(),
            "committer": self.committer.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class Tag:
    """A release tag whose name parses as a semantic version.

    Lightweight tags have no message, use the target commit's author as
    ``tagger`` and reuse the target commit's id as ``id``.
    """

    id: str
    message: Optional[str]
    name: str
    version: Version
    tagger: Optional[Signature]
    commit: Commit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "name": self.name,
            "version": str(self.version),
            "tagger": self.tagger.to_dict() if self.tagger else None,
            "commit": self.commit.to_dict(),
        }
