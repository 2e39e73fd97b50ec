"""Read-only repository access backed by GitPython."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from git import Repo
from git.exc import (
    BadName,
    BadObject,
    GitCommandError,
    InvalidGitRepositoryError,
    NoSuchPathError,
)
from git.util import hex_to_bin

from ..errors import RepositoryError
from .objects import RawCommit, RawTag, parse_commit, parse_tag

logger = logging.getLogger(__name__)

_ACCESS_ERRORS = (GitCommandError, BadName, BadObject, ValueError)


class GitRepo:
    """Wrapper around gitpython exposing the reads history extraction needs.

    Every failure of the underlying ``git`` process or object database is
    reported as :class:`~releaselog.errors.RepositoryError`.
    """

    def __init__(self, repo_path: Path):
        self.repo_path = Path(repo_path).resolve()
        try:
            self.repo = Repo(self.repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise RepositoryError(f"Not a valid git repository: {repo_path}") from e

    def __enter__(self) -> "GitRepo":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Stop the persistent ``git cat-file`` helpers."""
        self.repo.close()

    def walk_first_parent(self) -> List[str]:
        """Return commit ids reachable from HEAD along first parents.

        Ids come oldest first, in reverse topological order.
        """
        try:
            output = self.repo.git.rev_list(
                "HEAD", first_parent=True, topo_order=True, reverse=True
            )
        except _ACCESS_ERRORS as e:
            raise RepositoryError(f"cannot walk history from HEAD: {e}") from e
        return output.split()

    def read_object(self, object_id: str) -> Tuple[str, bytes]:
        """Return the kind and raw bytes of ``object_id``."""
        logger.debug("reading object %s", object_id)
        try:
            stream = self.repo.odb.stream(hex_to_bin(object_id))
            return stream.type.decode("ascii"), stream.read()
        except _ACCESS_ERRORS as e:
            raise RepositoryError(f"cannot read object: {e}", object_id) from e

    def read_commit(self, object_id: str) -> RawCommit:
        kind, data = self.read_object(object_id)
        if kind != "commit":
            raise RepositoryError(f"expected a commit, found a {kind}", object_id)
        return parse_commit(object_id, data)

    def read_tag(self, object_id: str) -> RawTag:
        kind, data = self.read_object(object_id)
        if kind != "tag":
            raise RepositoryError(f"expected a tag, found a {kind}", object_id)
        return parse_tag(object_id, data)

    def short_id(self, object_id: str) -> str:
        """Shortest prefix of ``object_id`` that is currently unambiguous."""
        try:
            return self.repo.git.rev_parse(object_id, short=True)
        except _ACCESS_ERRORS as e:
            raise RepositoryError(f"cannot abbreviate id: {e}", object_id) from e

    def tag_names(self) -> List[bytes]:
        """Short names of every ref under ``refs/tags``, undecoded."""
        try:
            output = self.repo.git.for_each_ref(
                "refs/tags", format="%(refname:strip=2)", stdout_as_string=False
            )
        except _ACCESS_ERRORS as e:
            raise RepositoryError(f"cannot list tags: {e}") from e
        return [line for line in output.split(b"\n") if line]

    def resolve(self, name: str) -> Tuple[str, str]:
        """Resolve the tag ref ``name`` to its object id and object kind.

        The ref is not peeled: an annotated tag resolves to the tag object.
        """
        try:
            object_id = self.repo.git.rev_parse("--verify", f"refs/tags/{name}")
            info = self.repo.odb.info(hex_to_bin(object_id))
        except _ACCESS_ERRORS as e:
            raise RepositoryError(f"cannot resolve tag: {e}", name) from e
        return object_id, info.type.decode("ascii")
