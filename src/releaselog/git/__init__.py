"""Git integration for reading commits and tags."""

from .objects import RawCommit, RawSignature, RawTag, parse_commit, parse_tag
from .repo import GitRepo

__all__ = [
    "GitRepo",
    "RawCommit",
    "RawSignature",
    "RawTag",
    "parse_commit",
    "parse_tag",
]
