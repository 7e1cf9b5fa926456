"""Repository, branch and tag models as seen on the remote host."""

from typing import Any, Dict, Optional
from pydantic import Field, field_validator
from .base import RemoteModel


class RepositoryRef(RemoteModel):
    """Identifies a repository by owner and name."""

    owner: str = Field(description="Owning user or organization login")
    name: str = Field(description="Repository name")

    @field_validator("owner", "name")
    @classmethod
    def validate_segment(cls, v: str) -> str:
        """Reject empty segments and anything that would escape the URL path."""
        v = v.strip()
        if not v:
            raise ValueError("Repository owner and name cannot be empty")
        if "/" in v or ".." in v:
            raise ValueError(f"Invalid repository segment '{v}'")
        return v

    @classmethod
    def parse(cls, full_name: str) -> "RepositoryRef":
        """Parse an ``owner/name`` string."""
        owner, sep, name = full_name.strip().partition("/")
        if not sep:
            raise ValueError(
                f"Invalid repository '{full_name}'. Expected format 'owner/name'"
            )
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


class Repository(RemoteModel):
    """A repository the authenticated user can access."""

    id: int = Field(description="Remote repository id")
    name: str = Field(description="Repository name")
    full_name: str = Field(description="owner/name")
    clone_url: Optional[str] = Field(default=None, description="HTTPS clone URL")
    default_branch: Optional[str] = Field(default=None, description="Default branch")
    owner: Optional[str] = Field(default=None, description="Owner login")

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Repository":
        owner = payload.get("owner") or {}
        return cls(
            id=payload["id"],
            name=payload["name"],
            full_name=payload["full_name"],
            clone_url=payload.get("clone_url"),
            default_branch=payload.get("default_branch"),
            owner=owner.get("login") if isinstance(owner, dict) else None,
        )

    @property
    def ref(self) -> RepositoryRef:
        return RepositoryRef.parse(self.full_name)


class Branch(RemoteModel):
    """A branch ref on the remote host.

    Branches are read-only here; selection state lives in ``WorkingSet``.
    """

    name: str = Field(description="Branch name, may contain '/'")
    commit_sha: str = Field(description="Head commit SHA")
    protected: bool = Field(default=False, description="Whether the host protects it")

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Branch":
        return cls(
            name=payload["name"],
            commit_sha=payload["commit"]["sha"],
            protected=bool(payload.get("protected", False)),
        )

    def can_delete(self) -> bool:
        """Check if this branch may be selected for archival or deletion."""
        return not self.protected


class Tag(RemoteModel):
    """A tag on the remote host."""

    name: str = Field(description="Tag name")
    commit_sha: str = Field(description="Tagged commit SHA")

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Tag":
        return cls(name=payload["name"], commit_sha=payload["commit"]["sha"])

    @property
    def short_sha(self) -> str:
        return self.commit_sha[:7]
