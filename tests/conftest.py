"""Pytest configuration and shared fixtures."""

import threading
import time

import pytest

from branchsweep.exceptions import RemoteAPIError
from branchsweep.models import Branch, RepositoryRef, Tag
from branchsweep.remote.client import Listing


class FakeRepositoryClient:
    """In-memory stand-in for RepositoryClient that records every call."""

    def __init__(self, branches=None, tags=None, protected=()):
        self.branches = dict(branches or {})
        self.protected = set(protected)
        self.tags = dict(tags or {})
        self.calls = []
        self.fail_tag_lookup = set()
        self.fail_create = set()
        self.fail_delete = set()
        self.delays = {}
        self._lock = threading.Lock()

    def _record(self, name, *args):
        with self._lock:
            self.calls.append((name,) + args)

    def calls_to(self, name):
        return [call for call in self.calls if call[0] == name]

    @property
    def mutations(self):
        return [c for c in self.calls if c[0] in ("create_tag", "delete_branch_ref")]

    def tag_exists(self, repo, tag_name, token):
        self._record("tag_exists", tag_name)
        if tag_name in self.fail_tag_lookup:
            raise RemoteAPIError("API Error (500): boom", status_code=500)
        return tag_name in self.tags

    def get_branch(self, repo, branch, token):
        self._record("get_branch", branch)
        if branch in self.delays:
            time.sleep(self.delays[branch])
        if branch not in self.branches:
            raise RemoteAPIError("API Error (404): Branch not found", status_code=404)
        return Branch(
            name=branch,
            commit_sha=self.branches[branch],
            protected=branch in self.protected,
        )

    def create_tag(self, repo, tag_name, commit_sha, token):
        self._record("create_tag", tag_name, commit_sha)
        if tag_name in self.fail_create:
            raise RemoteAPIError(
                "API Error (422): Reference already exists", status_code=422
            )
        with self._lock:
            self.tags[tag_name] = commit_sha

    def delete_branch_ref(self, repo, branch, token):
        self._record("delete_branch_ref", branch)
        if branch in self.delays and branch not in self.fail_delete:
            time.sleep(self.delays[branch])
        if branch in self.fail_delete:
            raise RemoteAPIError(
                "API Error (422): Reference does not exist", status_code=422
            )
        with self._lock:
            self.branches.pop(branch, None)

    def list_branches(self, repo, token):
        self._record("list_branches")
        return Listing(
            items=[
                Branch(name=name, commit_sha=sha, protected=name in self.protected)
                for name, sha in self.branches.items()
            ]
        )

    def list_tags(self, repo, token):
        self._record("list_tags")
        return Listing(
            items=[Tag(name=name, commit_sha=sha) for name, sha in self.tags.items()]
        )

    def list_repositories(self, token):
        self._record("list_repositories")
        return Listing(items=[])

    def close(self):
        pass


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep tests away from the user's config and environment."""
    for var in (
        "BRANCHSWEEP_TOKEN",
        "BRANCHSWEEP_API_URL",
        "BRANCHSWEEP_TAG_PREFIX",
        "BRANCHSWEEP_MAX_WORKERS",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("BRANCHSWEEP_HOME", str(tmp_path / "home"))
    yield


@pytest.fixture
def repo():
    return RepositoryRef(owner="acme", name="widgets")


@pytest.fixture
def fake_client():
    """Fake client holding a handful of branches and no tags."""
    return FakeRepositoryClient(
        branches={
            "main": "a" * 40,
            "feature/x": "b" * 40,
            "feature/y": "c" * 40,
            "feature-z": "d" * 40,
        },
        protected={"main"},
    )
