"""releaselog package.

Reads the first-parent commit line and the release tags of a git repository
into validated records for change log rendering.
"""

from .errors import HistoryError, InvalidTag, RepositoryError, SemVerError, Utf8Error
from .git import GitRepo
from .history import commits, tags
from .model import Commit, Signature, Tag

__all__ = [
    "Commit",
    "GitRepo",
    "HistoryError",
    "InvalidTag",
    "RepositoryError",
    "SemVerError",
    "Signature",
    "Tag",
    "Utf8Error",
    "commits",
    "tags",
]
