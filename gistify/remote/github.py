"""GitHub Gist client using the GitHub REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from gistify.exceptions import RemoteError, RemoteNotFoundError
from gistify.remote.base import SnippetRef

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"


class GistResponse(BaseModel):
    """Fields of a gist response that gistify relies on."""

    id: str
    html_url: str


class UserResponse(BaseModel):
    """Fields of the authenticated-user response that gistify relies on."""

    login: str


def _gist_payload(filename: str, content: str) -> dict[str, Any]:
    return {
        "description": "",
        "files": {filename: {"content": content}},
    }


def _parse_gist(resp: httpx.Response) -> SnippetRef:
    try:
        gist = GistResponse.model_validate(resp.json())
    except (ValueError, ValidationError) as exc:
        msg = f"GitHub returned a malformed gist response: {exc}"
        raise RemoteError(msg, status_code=resp.status_code) from exc
    return SnippetRef(remote_id=gist.id, url=gist.html_url)


def _api_error(action: str, resp: httpx.Response) -> RemoteError:
    msg = f"GitHub API error while trying to {action}: {resp.status_code} {resp.text}"
    return RemoteError(msg, status_code=resp.status_code)


class GistClient:
    """Create and edit gists on behalf of a token holder."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.client = httpx.Client(
            base_url=self.api_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
            timeout=timeout,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> GistClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _request(self, action: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return self.client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.exception("GitHub HTTP error while trying to %s", action)
            msg = f"HTTP error while trying to {action}: {exc}"
            raise RemoteError(msg) from exc

    def current_user(self) -> str:
        """Return the login of the token's owner; fails fast on a bad token."""
        resp = self._request("fetch the current user", "GET", "/user")
        if resp.status_code != 200:
            raise _api_error("fetch the current user", resp)
        try:
            user = UserResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            msg = f"GitHub returned a malformed user response: {exc}"
            raise RemoteError(msg, status_code=resp.status_code) from exc
        return user.login

    def create(self, filename: str, content: str, is_public: bool) -> SnippetRef:
        """Create a single-file gist."""
        payload = _gist_payload(filename, content)
        payload["public"] = is_public
        logger.info("Creating gist for %s (public=%s)", filename, is_public)
        resp = self._request(f"create a gist for {filename}", "POST", "/gists", json=payload)
        if resp.status_code not in (200, 201):
            raise _api_error(f"create a gist for {filename}", resp)
        return _parse_gist(resp)

    def update(self, remote_id: str, filename: str, content: str) -> SnippetRef:
        """Replace the file content of gist ``remote_id``."""
        action = f"update gist {remote_id}"
        logger.info("Updating gist %s for %s", remote_id, filename)
        resp = self._request(
            action, "PATCH", f"/gists/{remote_id}", json=_gist_payload(filename, content)
        )
        if resp.status_code == 404:
            msg = f"gist {remote_id} not found"
            raise RemoteNotFoundError(msg, status_code=404)
        if resp.status_code != 200:
            raise _api_error(action, resp)
        return _parse_gist(resp)
