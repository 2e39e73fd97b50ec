from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest
from git import Actor, Repo
from gitdb.base import IStream

from releaselog.errors import RepositoryError
from releaselog.git.objects import RawCommit, RawSignature, RawTag

AUTHOR = Actor("Ada Lovelace", "ada@example.com")
COMMITTER = Actor("Charles Babbage", "charles@example.com")


class FakeRepo:
    """In-memory stand-in for :class:`releaselog.git.GitRepo`."""

    def __init__(self) -> None:
        self.objects: Dict[str, Tuple[str, object]] = {}
        self.walk: List[str] = []
        self.refs: Dict[bytes, str] = {}
        self.unabbreviable: set[str] = set()

    def add_commit(self, raw: RawCommit, on_walk: bool = True) -> RawCommit:
        self.objects[raw.id] = ("commit", raw)
        if on_walk:
            self.walk.append(raw.id)
        return raw

    def add_tag(self, raw: RawTag) -> RawTag:
        self.objects[raw.id] = ("tag", raw)
        return raw

    def add_ref(self, name: bytes, object_id: str) -> None:
        self.refs[name] = object_id

    def walk_first_parent(self) -> List[str]:
        return list(self.walk)

    def _read(self, object_id: str, kind: str):
        if object_id not in self.objects:
            raise RepositoryError("object not found", object_id)
        found, raw = self.objects[object_id]
        if found != kind:
            raise RepositoryError(f"expected a {kind}, found a {found}", object_id)
        return raw

    def read_commit(self, object_id: str) -> RawCommit:
        return self._read(object_id, "commit")

    def read_tag(self, object_id: str) -> RawTag:
        return self._read(object_id, "tag")

    def short_id(self, object_id: str) -> str:
        if object_id in self.unabbreviable:
            raise RepositoryError("cannot abbreviate id", object_id)
        return object_id[:7]

    def tag_names(self) -> List[bytes]:
        return list(self.refs)

    def resolve(self, name: str) -> Tuple[str, str]:
        object_id = self.refs[name.encode("utf-8")]
        return object_id, self.objects[object_id][0]


def raw_signature(
    name: Optional[bytes] = b"Ada Lovelace",
    email: Optional[bytes] = b"ada@example.com",
    seconds: int = 1_700_000_000,
    offset: int = 120,
) -> RawSignature:
    return RawSignature(name=name, email=email, seconds=seconds, offset=offset)


def raw_commit(
    object_id: str,
    message: bytes = b"feat: something\n",
    author: Optional[RawSignature] = None,
    committer: Optional[RawSignature] = None,
) -> RawCommit:
    return RawCommit(
        id=object_id,
        message=message,
        author=author or raw_signature(),
        committer=committer or raw_signature(b"Charles Babbage", b"charles@example.com", 1_700_000_600),
    )


def commit_file(
    repo: Repo, name: str, message: str, seconds: int = 1_700_000_000, **kwargs
):
    """Write ``name`` in the working tree and commit it through the index."""

    path = Path(repo.working_tree_dir) / name
    path.write_text(f"{name} {message}\n", encoding="utf-8")
    repo.index.add([name])
    date = f"{seconds} +0200"
    return repo.index.commit(
        message,
        author=AUTHOR,
        committer=COMMITTER,
        author_date=date,
        commit_date=date,
        **kwargs,
    )


def store_object(repo: Repo, kind: bytes, data: bytes) -> str:
    """Write a raw object into the object database and return its id."""

    istream = repo.odb.store(IStream(kind, len(data), BytesIO(data)))
    return istream.hexsha.decode("ascii")


@pytest.fixture
def fake_repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture
def git_repo(tmp_path):
    repo = Repo.init(tmp_path / "repo")
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Grace Hopper")
        writer.set_value("user", "email", "grace@example.com")
    yield repo
    repo.close()
