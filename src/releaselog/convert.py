"""Conversion of raw repository objects into validated records.

Every converter is a pure transformation apart from the repository reads it
delegates to the handle it is given (short ids and tag targets). Failures are
raised as :mod:`releaselog.errors` subclasses and classified by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from semver import Version

from .errors import InvalidTag, RepositoryError, SemVerError, Utf8Error
from .git.objects import RawCommit, RawSignature, RawTag
from .git.repo import GitRepo
from .model import Commit, Signature, Tag


@dataclass(frozen=True, slots=True)
class AnnotatedTagSource:
    """A tag ref resolving to a tag object."""

    raw: RawTag


@dataclass(frozen=True, slots=True)
class LightweightTagSource:
    """A tag ref pointing straight at a commit."""

    name: str
    commit: RawCommit


TagSource = Union[AnnotatedTagSource, LightweightTagSource]


def decode_text(raw: Optional[bytes], field: str) -> str:
    if raw is None:
        raise Utf8Error(field)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise Utf8Error(field) from e


def _optional_text(raw: Optional[bytes]) -> Optional[str]:
    """Decode ``raw``, treating undecodable bytes like an absent value."""
    if raw is None:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


def utc_instant(seconds: int) -> datetime:
    """Interpret ``seconds`` since the epoch as a UTC instant."""
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise RepositoryError(f"timestamp {seconds} is out of range") from e


def parse_version(name: str, prefix: str = "v") -> Version:
    """Parse a tag name as a semantic version, dropping one leading ``prefix``."""
    text = name[len(prefix):] if prefix and name.startswith(prefix) else name
    try:
        return Version.parse(text)
    except ValueError as e:
        raise SemVerError(f"{name!r} is not a semantic version") from e


def convert_signature(raw: RawSignature) -> Signature:
    return Signature(
        name=decode_text(raw.name, "signature name"),
        email=decode_text(raw.email, "signature email"),
        time=utc_instant(raw.seconds),
    )


def convert_commit(repo: GitRepo, raw: RawCommit) -> Commit:
    """Build a :class:`Commit` from ``raw``.

    The short id is computed against ``repo`` at conversion time. The message
    keeps its leading content and internal formatting; only trailing
    whitespace is removed.
    """

    return Commit(
        id=raw.id,
        short_id=repo.short_id(raw.id),
        message=decode_text(raw.message, "commit message").rstrip(),
        time=utc_instant(raw.committer.seconds),
        author=convert_signature(raw.author),
        committer=convert_signature(raw.committer),
    )


def convert_annotated_tag(repo: GitRepo, raw: RawTag, prefix: str = "v") -> Tag:
    if raw.target_kind != "commit":
        raise InvalidTag(f"tag points at a {raw.target_kind}, not a commit")

    name = decode_text(raw.name, "tag name")
    version = parse_version(name, prefix)
    message = _optional_text(raw.message)
    tagger = convert_signature(raw.tagger) if raw.tagger is not None else None

    return Tag(
        id=raw.id,
        message=message,
        name=name,
        version=version,
        tagger=tagger,
        commit=convert_commit(repo, repo.read_commit(raw.target_id)),
    )


def convert_lightweight_tag(
    repo: GitRepo, name: str, raw: RawCommit, prefix: str = "v"
) -> Tag:
    """Build a :class:`Tag` for a ref with no tag object.

    The commit author stands in for the tagger and the commit id is used as
    the tag id.
    """

    version = parse_version(name, prefix)
    return Tag(
        id=raw.id,
        message=None,
        name=name,
        version=version,
        tagger=convert_signature(raw.author),
        commit=convert_commit(repo, raw),
    )


def resolve_tag_source(repo: GitRepo, name: str) -> TagSource:
    object_id, kind = repo.resolve(name)
    if kind == "tag":
        return AnnotatedTagSource(repo.read_tag(object_id))
    if kind == "commit":
        return LightweightTagSource(name, repo.read_commit(object_id))
    raise RepositoryError(f"tag ref resolves to a {kind}, expected a tag or commit", name)


def convert_tag(repo: GitRepo, source: TagSource, prefix: str = "v") -> Tag:
    if isinstance(source, AnnotatedTagSource):
        return convert_annotated_tag(repo, source.raw, prefix)
    return convert_lightweight_tag(repo, source.name, source.commit, prefix)
