# leethub/git_data.py
# Thin wrappers around GitHub's Git Data endpoints. One request per function.
import base64
import logging
from typing import Any, Dict, List, Optional, Type

import httpx

from .config import GITHUB_API
from .errors import RefUpdateError, RemoteOperationError

log = logging.getLogger("leethub.git_data")

FILE_MODE = "100644"  # regular, non-executable


def _gh_headers(token: str, with_body: bool = False) -> Dict[str, str]:
    headers = {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github+json",
    }
    if with_body:
        headers["Content-Type"] = "application/json"
    return headers


def encode_content(text: str) -> str:
    """UTF-8 encode, then base64, so multi-byte text survives the ASCII payload."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


async def _call(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    token: str,
    *,
    step: str,
    payload: Optional[Dict[str, Any]] = None,
    error_cls: Type[RemoteOperationError] = RemoteOperationError,
) -> Dict[str, Any]:
    log.debug("%s: %s %s", step, method, url)
    try:
        r = await client.request(
            method, url, headers=_gh_headers(token, with_body=payload is not None), json=payload
        )
        r.raise_for_status()
        return r.json()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        raise error_cls(f"{step} failed: HTTP {status}", status_code=status) from e
    except httpx.HTTPError as e:
        raise error_cls(f"{step} failed: {e!r}") from e
    except ValueError as e:
        # body was not JSON
        raise error_cls(f"{step} failed: invalid response body") from e


def _pick(data: Dict[str, Any], step: str, *keys: str) -> str:
    cur: Any = data
    for k in keys:
        if not isinstance(cur, dict) or k not in cur:
            raise RemoteOperationError(f"{step} failed: response has no {'.'.join(keys)}")
        cur = cur[k]
    return cur


async def get_latest_commit_sha(client: httpx.AsyncClient, repo: str, branch: str, token: str) -> str:
    """SHA of the commit at the tip of `branch`."""
    url = f"{GITHUB_API}/repos/{repo}/git/ref/heads/{branch}"
    data = await _call(client, "GET", url, token, step="read ref")
    return _pick(data, "read ref", "object", "sha")


async def create_blob(client: httpx.AsyncClient, repo: str, content: str, token: str) -> str:
    """`content` must already be base64 (see encode_content)."""
    url = f"{GITHUB_API}/repos/{repo}/git/blobs"
    payload = {"content": content, "encoding": "base64"}
    data = await _call(client, "POST", url, token, step="create blob", payload=payload)
    return _pick(data, "create blob", "sha")


async def get_commit_tree_sha(client: httpx.AsyncClient, repo: str, commit_sha: str, token: str) -> str:
    url = f"{GITHUB_API}/repos/{repo}/git/commits/{commit_sha}"
    data = await _call(client, "GET", url, token, step="read commit")
    return _pick(data, "read commit", "tree", "sha")


async def create_tree(
    client: httpx.AsyncClient,
    repo: str,
    base_tree_sha: str,
    entries: List[Dict[str, str]],  # [{path, mode, type, sha}]
    token: str,
) -> str:
    url = f"{GITHUB_API}/repos/{repo}/git/trees"
    payload = {"base_tree": base_tree_sha, "tree": entries}
    data = await _call(client, "POST", url, token, step="create tree", payload=payload)
    return _pick(data, "create tree", "sha")


async def create_commit(
    client: httpx.AsyncClient,
    repo: str,
    message: str,
    tree_sha: str,
    parent_sha: str,
    token: str,
) -> str:
    url = f"{GITHUB_API}/repos/{repo}/git/commits"
    payload = {"message": message, "tree": tree_sha, "parents": [parent_sha]}
    data = await _call(client, "POST", url, token, step="create commit", payload=payload)
    return _pick(data, "create commit", "sha")


async def update_ref(client: httpx.AsyncClient, repo: str, branch: str, commit_sha: str, token: str) -> Dict[str, Any]:
    """Move `branch` to `commit_sha`. Not forced, so GitHub rejects anything but a fast-forward."""
    url = f"{GITHUB_API}/repos/{repo}/git/refs/heads/{branch}"
    return await _call(
        client, "PATCH", url, token,
        step="update ref", payload={"sha": commit_sha}, error_cls=RefUpdateError,
    )
