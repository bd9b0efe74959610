"""Commit an updated manifest through the GitHub API as a GitHub App."""

import os
import time
from collections.abc import Mapping
from pathlib import PurePosixPath

import httpx
import jwt

from .errors import CommitError
from .models import RepositoryRef

GITHUB_API_URL = "https://api.github.com"
BRANCH_REF_PREFIX = "refs/heads/"


def resolve_repository(env: Mapping[str, str] | None = None) -> RepositoryRef:
    """Resolve owner, repository and branch from the Actions environment.

    The branch is ``GITHUB_HEAD_REF`` for pull request runs, otherwise
    ``GITHUB_REF`` with its ``refs/heads/`` prefix removed.

    Raises:
        CommitError: If a required variable is missing or malformed
    """
    env = os.environ if env is None else env

    repository = env.get("GITHUB_REPOSITORY", "")
    if not repository:
        raise CommitError("GITHUB_REPOSITORY is not set")
    owner, _, repo = repository.partition("/")
    if not owner or not repo or "/" in repo:
        raise CommitError(f"GITHUB_REPOSITORY must look like 'owner/repo', got '{repository}'")

    branch = env.get("GITHUB_HEAD_REF", "")
    if not branch:
        ref = env.get("GITHUB_REF", "")
        if not ref:
            raise CommitError("Neither GITHUB_HEAD_REF nor GITHUB_REF is set")
        if not ref.startswith(BRANCH_REF_PREFIX) or ref == BRANCH_REF_PREFIX:
            raise CommitError(f"GITHUB_REF does not name a branch: '{ref}'")
        branch = ref[len(BRANCH_REF_PREFIX):]

    return RepositoryRef(owner=owner, repo=repo, branch=branch)


def create_app_jwt(app_id: str, private_key: str, now: int | None = None) -> str:
    """Create the short-lived JWT a GitHub App authenticates with."""
    issued_at = int(time.time()) if now is None else now
    payload = {
        # Backdated for clock drift.
        "iat": issued_at - 60,
        "exp": issued_at + 540,
        "iss": app_id,
    }
    try:
        return jwt.encode(payload, private_key, algorithm="RS256")
    except (ValueError, TypeError, jwt.PyJWTError) as e:
        raise CommitError(f"Invalid GitHub App private key: {e}") from e


class GitHubAppCommitter:
    """Creates a single-file commit on the current branch."""

    def __init__(
        self,
        app_id: str,
        installation_id: str,
        private_key: str,
        message: str,
        api_url: str = GITHUB_API_URL,
        env: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize committer.

        Args:
            app_id: GitHub App ID
            installation_id: Installation ID of the app on the repository
            private_key: PEM encoded private key of the app
            message: Commit message
            api_url: GitHub REST API base URL
            env: Environment to resolve the repository from
            transport: Optional httpx transport (used by tests)
        """
        self.app_id = app_id
        self.installation_id = installation_id
        self.private_key = private_key
        self.message = message
        self.api_url = api_url.rstrip("/")
        self.env = env
        self.transport = transport

    async def commit(self, path: str, content: str) -> str:
        """Commit ``content`` as the new version of ``path``.

        Returns:
            SHA of the created commit
        """
        repository = resolve_repository(self.env)

        try:
            async with self._client() as client:
                token = await self._installation_token(client)
                client.headers["Authorization"] = f"Bearer {token}"
                return await self._push(client, repository, path, content)
        except httpx.HTTPStatusError as e:
            raise CommitError(
                f"GitHub API returned {e.response.status_code} for {e.request.method} {e.request.url.path}"
            ) from e
        except httpx.HTTPError as e:
            raise CommitError(f"GitHub API request failed: {e}") from e

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            transport=self.transport,
        )

    async def _installation_token(self, client: httpx.AsyncClient) -> str:
        app_jwt = create_app_jwt(self.app_id, self.private_key)
        response = await client.post(
            f"/app/installations/{self.installation_id}/access_tokens",
            headers={"Authorization": f"Bearer {app_jwt}"},
        )
        response.raise_for_status()
        token = response.json().get("token")
        if not token:
            raise CommitError("GitHub did not return an installation token")
        return token

    async def _push(
        self, client: httpx.AsyncClient, repository: RepositoryRef, path: str, content: str
    ) -> str:
        base = f"/repos/{repository.owner}/{repository.repo}/git"
        blob = {
            "path": PurePosixPath(path).as_posix(),
            "mode": "100644",
            "type": "blob",
            "content": content,
        }

        ref = await client.get(f"{base}/ref/heads/{repository.branch}")
        ref.raise_for_status()
        head_sha = ref.json()["object"]["sha"]

        head_commit = await client.get(f"{base}/commits/{head_sha}")
        head_commit.raise_for_status()
        base_tree = head_commit.json()["tree"]["sha"]

        tree = await client.post(f"{base}/trees", json={"base_tree": base_tree, "tree": [blob]})
        tree.raise_for_status()

        new_commit = await client.post(
            f"{base}/commits",
            json={"message": self.message, "tree": tree.json()["sha"], "parents": [head_sha]},
        )
        new_commit.raise_for_status()
        commit_sha = new_commit.json()["sha"]

        updated = await client.patch(
            f"{base}/refs/heads/{repository.branch}", json={"sha": commit_sha}
        )
        updated.raise_for_status()
        return commit_sha
