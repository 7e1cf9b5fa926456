"""HTTP client for the remote repository host (GitHub REST API v3)."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterator, List, Optional, TypeVar
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from branchsweep.config import DEFAULT_API_URL, SweepConfig
from branchsweep.exceptions import (
    AuthenticationMissing,
    PaginationLimitExceeded,
    RemoteAPIError,
)
from branchsweep.models import Branch, Repository, RepositoryRef, Tag

logger = logging.getLogger(__name__)

T = TypeVar("T")

ACCEPT_HEADER = "application/vnd.github.v3+json"
RETRY_STATUSES = (429, 502, 503, 504)


@dataclass
class Listing(Generic[T]):
    """Items collected from a paginated listing."""

    items: List[T] = field(default_factory=list)
    truncated: bool = False

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)


class RepositoryClient:
    """Performs the remote reads and writes branchsweep needs.

    The client never holds a credential: each call receives the bearer token it
    should present, so one client can serve many callers.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        retries: int = 3,
        per_page: int = 100,
        max_pages: int = 10,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            api_url: Base URL of the REST API
            timeout: Timeout in seconds applied to every request
            retries: Retries for idempotent reads on throttling/gateway errors
            per_page: Page size for listings
            max_pages: Hard ceiling on pages fetched per listing
            session: Optional preconfigured requests session
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.per_page = per_page
        self.max_pages = max_pages
        self._session = session or self._build_session(retries)

    @classmethod
    def from_config(
        cls, config: SweepConfig, api_url: Optional[str] = None
    ) -> "RepositoryClient":
        """Build a client from loaded settings."""
        profile = config.active_credentials()
        return cls(
            api_url=api_url or (profile.api_url if profile else config.api_url),
            timeout=config.timeout,
            retries=config.retries,
            per_page=config.per_page,
            max_pages=config.max_pages,
        )

    @staticmethod
    def _build_session(retries: int) -> requests.Session:
        session = requests.Session()
        retry = Retry(
            total=retries,
            backoff_factor=0.5,
            status_forcelist=RETRY_STATUSES,
            allowed_methods=frozenset({"GET", "HEAD"}),
            respect_retry_after_header=True,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry, pool_maxsize=32)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers.update({"Accept": ACCEPT_HEADER})
        return session

    def close(self) -> None:
        self._session.close()

    def _request(
        self, method: str, path: str, token: str, **kwargs: Any
    ) -> requests.Response:
        """Send a request presenting ``token``.

        Raises:
            AuthenticationMissing: If no token was given
            RemoteAPIError: On transport failures
        """
        if not token:
            raise AuthenticationMissing()

        url = f"{self.api_url}{path}"
        headers = {"Authorization": f"Bearer {token}"}
        logger.debug(f"{method} {url}")

        try:
            return self._session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise RemoteAPIError(f"Request to {url} failed: {e}") from e

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text or response.reason or "Unknown error"
        if isinstance(payload, dict):
            return str(payload.get("message", "Unknown error"))
        return "Unknown error"

    def _raise_for_status(self, response: requests.Response, action: str) -> None:
        if response.status_code < 400:
            return

        detail = self._error_detail(response)
        logger.error(
            f"Remote API error while trying to {action}: "
            f"status={response.status_code} detail={detail} "
            f"ratelimit-remaining={response.headers.get('x-ratelimit-remaining')} "
            f"ratelimit-reset={response.headers.get('x-ratelimit-reset')}"
        )
        raise RemoteAPIError(
            f"API Error ({response.status_code}) while trying to {action}: {detail}",
            status_code=response.status_code,
            detail=detail,
        )

    @staticmethod
    def _repo_path(repo: RepositoryRef) -> str:
        return f"/repos/{quote(repo.owner, safe='')}/{quote(repo.name, safe='')}"

    # Account

    def get_authenticated_user(self, token: str) -> Dict[str, Any]:
        """Return the profile of the user owning ``token``."""
        response = self._request("GET", "/user", token)
        self._raise_for_status(response, "fetch the authenticated user")
        return response.json()

    def list_organizations(self, token: str) -> List[str]:
        """Return the logins of organizations the user belongs to."""
        response = self._request("GET", "/user/orgs", token)
        self._raise_for_status(response, "list organizations")
        return [org["login"] for org in response.json()]

    def iter_repositories(self, token: str) -> Iterator[Repository]:
        """Lazily list repositories the user owns or reaches through an organization."""
        params = {"affiliation": "owner,organization_member", "sort": "updated"}
        for payload in self._paginate("/user/repos", token, "repositories", params):
            yield Repository.from_api(payload)

    def list_repositories(self, token: str) -> Listing[Repository]:
        return self._collect(self.iter_repositories(token))

    # Refs

    def get_branch(self, repo: RepositoryRef, branch: str, token: str) -> Branch:
        """Fetch a single branch, including its head commit."""
        response = self._request(
            "GET", f"{self._repo_path(repo)}/branches/{quote(branch, safe='/')}", token
        )
        self._raise_for_status(response, f"fetch branch '{branch}'")
        return Branch.from_api(response.json())

    def tag_exists(self, repo: RepositoryRef, tag_name: str, token: str) -> bool:
        """Check whether ``tag_name`` exists.

        Only an explicit 404 means "absent"; every other non-200 answer raises.

        Raises:
            RemoteAPIError: If the lookup failed or was ambiguous
        """
        response = self._request(
            "GET",
            f"{self._repo_path(repo)}/git/ref/tags/{quote(tag_name, safe='/')}",
            token,
        )
        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        self._raise_for_status(response, f"look up tag '{tag_name}'")
        raise RemoteAPIError(
            f"Unexpected status {response.status_code} looking up tag '{tag_name}'",
            status_code=response.status_code,
        )

    def create_tag(
        self, repo: RepositoryRef, tag_name: str, commit_sha: str, token: str
    ) -> None:
        """Create a lightweight tag ``tag_name`` pointing at ``commit_sha``."""
        response = self._request(
            "POST",
            f"{self._repo_path(repo)}/git/refs",
            token,
            json={"ref": f"refs/tags/{tag_name}", "sha": commit_sha},
        )
        self._raise_for_status(response, f"create tag '{tag_name}'")
        logger.debug(f"Created tag {tag_name} at {commit_sha[:7]} in {repo}")

    def delete_branch_ref(self, repo: RepositoryRef, branch: str, token: str) -> None:
        """Delete the ref ``refs/heads/<branch>``."""
        response = self._request(
            "DELETE",
            f"{self._repo_path(repo)}/git/refs/heads/{quote(branch, safe='/')}",
            token,
        )
        self._raise_for_status(response, f"delete branch '{branch}'")
        logger.debug(f"Deleted branch {branch} in {repo}")

    def iter_branches(self, repo: RepositoryRef, token: str) -> Iterator[Branch]:
        """Lazily list branches.

        Raises:
            PaginationLimitExceeded: After yielding ``max_pages`` pages when more remain
        """
        path = f"{self._repo_path(repo)}/branches"
        for payload in self._paginate(path, token, f"branches of {repo}"):
            yield Branch.from_api(payload)

    def iter_tags(self, repo: RepositoryRef, token: str) -> Iterator[Tag]:
        """Lazily list tags.

        Raises:
            PaginationLimitExceeded: After yielding ``max_pages`` pages when more remain
        """
        path = f"{self._repo_path(repo)}/tags"
        for payload in self._paginate(path, token, f"tags of {repo}"):
            yield Tag.from_api(payload)

    def list_branches(self, repo: RepositoryRef, token: str) -> Listing[Branch]:
        return self._collect(self.iter_branches(repo, token))

    def list_tags(self, repo: RepositoryRef, token: str) -> Listing[Tag]:
        return self._collect(self.iter_tags(repo, token))

    def _paginate(
        self,
        path: str,
        token: str,
        resource: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Yield raw items page by page until no ``next`` link is advertised."""
        params = dict(params or {})
        params["per_page"] = self.per_page
        page = 1
        fetched = 0

        while True:
            params["page"] = page
            response = self._request("GET", path, token, params=params)
            self._raise_for_status(response, f"list {resource}")

            for item in response.json():
                fetched += 1
                yield item

            if "next" not in response.links:
                return

            if page >= self.max_pages:
                raise PaginationLimitExceeded(resource, self.max_pages, fetched)

            page += 1

    @staticmethod
    def _collect(iterator: Iterator[T]) -> Listing[T]:
        items: List[T] = []
        try:
            for item in iterator:
                items.append(item)
        except PaginationLimitExceeded as e:
            logger.warning(str(e))
            return Listing(items=items, truncated=True)
        return Listing(items=items)
