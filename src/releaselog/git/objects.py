"""Raw git object records, parsed from object bytes without decoding text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..errors import RepositoryError

_ACTOR_RE = re.compile(rb"^(?P<name>.*?) ?<(?P<email>.*)>(?P<when>.*)$")
_SECONDS_RE = re.compile(rb"-?\d+")
_OFFSET_RE = re.compile(rb"[+-]\d{4}")


@dataclass(frozen=True, slots=True)
class RawSignature:
    """An ``author``, ``committer`` or ``tagger`` header as stored.

    Attributes
    ----------
    name, email:
        Undecoded bytes. ``None`` marks a field that could not be read at
        all.
    seconds:
        Seconds since the epoch.
    offset:
        Minutes east of UTC recorded next to the timestamp.
    """

    name: Optional[bytes]
    email: Optional[bytes]
    seconds: int
    offset: int = 0


@dataclass(frozen=True, slots=True)
class RawCommit:
    id: str
    message: bytes
    author: RawSignature
    committer: RawSignature


@dataclass(frozen=True, slots=True)
class RawTag:
    """An annotated tag object.

    ``message`` is ``None`` when the object carries no message section at all,
    as opposed to an empty one.
    """

    id: str
    target_id: str
    target_kind: str
    name: Optional[bytes]
    message: Optional[bytes]
    tagger: Optional[RawSignature]


def split_object(data: bytes) -> Tuple[List[Tuple[bytes, bytes]], Optional[bytes]]:
    """Split commit or tag object bytes into headers and message.

    Continuation lines (a leading space, as used by ``gpgsig`` and
    ``mergetag``) are folded into the preceding header value.
    """

    head, separator, body = data.partition(b"\n\n")
    if not separator:
        head = head.rstrip(b"\n")
    headers: List[Tuple[bytes, bytes]] = []
    for line in head.split(b"\n"):
        if line.startswith(b" ") and headers:
            key, value = headers[-1]
            headers[-1] = (key, value + b"\n" + line[1:])
        elif line:
            key, _, value = line.partition(b" ")
            headers.append((key, value))
    return headers, (body if separator else None)


def parse_signature(line: bytes, object_id: str) -> RawSignature:
    """Parse an actor line, reading the time part leniently.

    Only a line without an ``<email>`` part is rejected. A timestamp or
    timezone that does not parse reads as 0, as git itself tolerates them.
    """

    match = _ACTOR_RE.match(line)
    if match is None:
        raise RepositoryError("malformed signature line", object_id)
    parts = match.group("when").split()
    seconds = parts[0] if parts and _SECONDS_RE.fullmatch(parts[0]) else b"0"
    offset = parts[1] if len(parts) > 1 and _OFFSET_RE.fullmatch(parts[1]) else b"+0000"
    minutes = int(offset[1:3]) * 60 + int(offset[3:5])
    return RawSignature(
        name=match.group("name"),
        email=match.group("email"),
        seconds=int(seconds),
        offset=-minutes if offset.startswith(b"-") else minutes,
    )


def _first(headers: List[Tuple[bytes, bytes]], key: bytes) -> Optional[bytes]:
    for name, value in headers:
        if name == key:
            return value
    return None


def _ascii(value: bytes, field: str, object_id: str) -> str:
    try:
        return value.decode("ascii")
    except UnicodeDecodeError as exc:
        raise RepositoryError(f"malformed {field} header", object_id) from exc


def parse_commit(object_id: str, data: bytes) -> RawCommit:
    headers, message = split_object(data)
    author = _first(headers, b"author")
    committer = _first(headers, b"committer")
    if author is None or committer is None:
        raise RepositoryError("commit is missing its author or committer", object_id)
    return RawCommit(
        id=object_id,
        message=message or b"",
        author=parse_signature(author, object_id),
        committer=parse_signature(committer, object_id),
    )


def parse_tag(object_id: str, data: bytes) -> RawTag:
    headers, message = split_object(data)
    target = _first(headers, b"object")
    kind = _first(headers, b"type")
    if target is None or kind is None:
        raise RepositoryError("tag is missing its target", object_id)
    tagger = _first(headers, b"tagger")
    return RawTag(
        id=object_id,
        target_id=_ascii(target, "object", object_id),
        target_kind=_ascii(kind, "type", object_id),
        name=_first(headers, b"tag"),
        message=message,
        tagger=parse_signature(tagger, object_id) if tagger is not None else None,
    )
