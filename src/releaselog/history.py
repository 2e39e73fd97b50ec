"""Commit and tag extraction pipelines.

Both pipelines convert one entry at a time and settle every conversion into a
:class:`Keep`, :class:`Skip` or :class:`Abort` outcome. Skipped entries are
reported to a diagnostic sink; the first abort fails the whole call and no
partial result is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple, Type, Union

from .convert import convert_commit, convert_tag, decode_text, resolve_tag_source
from .errors import HistoryError, SemVerError, Utf8Error
from .git.repo import GitRepo
from .model import Commit, Tag

logger = logging.getLogger(__name__)

DiagnosticSink = Callable[[str], None]

COMMIT_SKIPPABLE: Tuple[Type[HistoryError], ...] = (Utf8Error,)
TAG_SKIPPABLE: Tuple[Type[HistoryError], ...] = (Utf8Error, SemVerError)


@dataclass(frozen=True, slots=True)
class Keep:
    value: Any


@dataclass(frozen=True, slots=True)
class Skip:
    diagnostic: str


@dataclass(frozen=True, slots=True)
class Abort:
    error: HistoryError


Outcome = Union[Keep, Skip, Abort]


def log_diagnostic(line: str) -> None:
    """Default sink: send skip diagnostics through :mod:`logging`."""
    logger.warning(line)


def settle(
    convert: Callable[[], Any],
    kind: str,
    subject: Optional[str],
    skippable: Tuple[Type[HistoryError], ...],
) -> Outcome:
    """Run ``convert`` and classify its result for the entry ``subject``."""
    try:
        return Keep(convert())
    except skippable as error:
        return Skip(f"ignoring bad {kind} {subject or ''}: {error.message}")
    except HistoryError as error:
        return Abort(error.with_subject(subject))


def gather(outcomes: Iterable[Outcome], sink: DiagnosticSink) -> List[Any]:
    kept: List[Any] = []
    for outcome in outcomes:
        if isinstance(outcome, Abort):
            raise outcome.error
        if isinstance(outcome, Skip):
            sink(outcome.diagnostic)
        else:
            kept.append(outcome.value)
    return kept


def _commit_outcomes(repo: GitRepo) -> Iterator[Outcome]:
    for object_id in repo.walk_first_parent():
        yield settle(
            lambda: convert_commit(repo, repo.read_commit(object_id)),
            "commit",
            object_id,
            COMMIT_SKIPPABLE,
        )


def _tag_outcomes(repo: GitRepo, prefix: str) -> Iterator[Outcome]:
    for raw_name in repo.tag_names():

        def convert() -> Tag:
            name = decode_text(raw_name, "tag name")
            return convert_tag(repo, resolve_tag_source(repo, name), prefix)

        yield settle(
            convert,
            "tag",
            raw_name.decode("utf-8", "backslashreplace"),
            TAG_SKIPPABLE,
        )


def commits(repo: GitRepo, sink: Optional[DiagnosticSink] = None) -> List[Commit]:
    """Fetch the commits to be presented in the change log.

    Walks the first-parent line from HEAD and returns its commits oldest
    first. Commits with text that is not valid UTF-8 are skipped with a
    diagnostic line; any other failure is raised as a single
    :class:`~releaselog.errors.HistoryError` carrying the offending commit id.
    """

    return gather(_commit_outcomes(repo), sink or log_diagnostic)


def tags(
    repo: GitRepo, sink: Optional[DiagnosticSink] = None, prefix: str = "v"
) -> List[Tag]:
    """Fetch the release tags of the repository, sorted by version.

    Tags whose name is not valid UTF-8 or not a semantic version are skipped
    with a diagnostic line. A tag that does not point at a commit, or any
    repository failure, is raised as a single
    :class:`~releaselog.errors.HistoryError` carrying the offending ref name.
    Tags with equal versions keep the order in which their refs were listed.
    """

    collected = gather(_tag_outcomes(repo, prefix), sink or log_diagnostic)
    return sorted(collected, key=attrgetter("version"))
