# leethub/committer.py
# Commit a solved problem (README + source) in one commit via the Git Data API:
# ref -> blobs -> base tree -> tree -> commit -> ref update.
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from . import git_data
from .config import GITHUB_TIMEOUT, STATS_KEY, TOKEN_KEY
from .errors import InvalidCommitRequest, MissingCredentialError
from .store import KeyValueStore, get_and_initialize_stats

log = logging.getLogger("leethub.committer")


@dataclass
class SolutionFile:
    filename: str
    content: str


@dataclass
class FileEntry:
    path: str
    sha: str
    mode: str = git_data.FILE_MODE
    type: str = "blob"

    def as_tree_item(self) -> Dict[str, str]:
        return {"path": self.path, "mode": self.mode, "type": self.type, "sha": self.sha}


def _is_file_item(f: Any) -> bool:
    if not isinstance(f, dict):
        return False
    filename, content = f.get("filename"), f.get("content")
    return isinstance(filename, str) and bool(filename) and (content is None or isinstance(content, str))


@dataclass
class CommitRequest:
    repo: str  # "owner/name"
    branch: str
    problem_name: str
    directory: str
    files: List[SolutionFile] = field(default_factory=list)
    difficulty: Optional[str] = None
    commit_message: str = "Add solution"

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CommitRequest":
        """
        payload:
          repo: "owner/repo"
          branch: "main"
          problemName: "0584-find-customer-referee"
          directory: "MySQL/LeetHub/Easy/0584-find-customer-referee"
          files: [{"filename": "README.md", "content": "..."}, ...]
          difficulty: "Easy"              (optional)
          commitMsg: "Organize solution"  (optional)
        snake_case keys (problem_name, commit_message) are accepted too.
        """
        if not isinstance(payload, dict):
            raise InvalidCommitRequest("payload must be an object")

        missing = [k for k in ("repo", "branch", "directory") if not payload.get(k)]
        problem_name = payload.get("problemName") or payload.get("problem_name")
        if not problem_name:
            missing.append("problemName")
        if missing:
            raise InvalidCommitRequest(f"missing field(s): {', '.join(missing)}")

        raw_files = payload.get("files") or []
        if not raw_files or not all(_is_file_item(f) for f in raw_files):
            raise InvalidCommitRequest("files must be a non-empty list of {filename: str, content: str}")

        return cls(
            repo=payload["repo"],
            branch=payload["branch"],
            problem_name=problem_name,
            directory=payload["directory"],
            files=[SolutionFile(f["filename"], f.get("content") or "") for f in raw_files],
            difficulty=payload.get("difficulty"),
            commit_message=payload.get("commitMsg") or payload.get("commit_message") or "Add solution",
        )


def _file_path(directory: str, filename: str) -> str:
    return f"{directory.rstrip('/')}/{filename}"


async def _commit(client: httpx.AsyncClient, req: CommitRequest, token: str) -> str:
    latest_sha = await git_data.get_latest_commit_sha(client, req.repo, req.branch, token)

    # one blob at a time, in input order
    entries: List[FileEntry] = []
    for f in req.files:
        blob_sha = await git_data.create_blob(client, req.repo, git_data.encode_content(f.content), token)
        entries.append(FileEntry(path=_file_path(req.directory, f.filename), sha=blob_sha))

    base_tree_sha = await git_data.get_commit_tree_sha(client, req.repo, latest_sha, token)
    tree_sha = await git_data.create_tree(
        client, req.repo, base_tree_sha, [e.as_tree_item() for e in entries], token
    )
    commit_sha = await git_data.create_commit(client, req.repo, req.commit_message, tree_sha, latest_sha, token)
    await git_data.update_ref(client, req.repo, req.branch, commit_sha, token)
    return commit_sha


async def commit_solution_files(
    request: CommitRequest,
    *,
    store: KeyValueStore,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Commit all files of `request` as a single commit and return its SHA.

    Raises MissingCredentialError before touching the network when no token
    is stored. Any failed call raises RemoteOperationError (RefUpdateError for
    a rejected ref update) and leaves both the branch and the stats untouched.
    Stats are written only after the ref update, so a failing store write
    surfaces as an error even though the commit is already on the branch.
    """
    token = store.get(TOKEN_KEY)
    if not token:
        raise MissingCredentialError("leethub token is undefined")

    if client is None:
        async with httpx.AsyncClient(timeout=GITHUB_TIMEOUT) as own_client:
            commit_sha = await _commit(own_client, request, token)
    else:
        commit_sha = await _commit(client, request, token)

    stats = get_and_initialize_stats(store, request.problem_name)
    record = stats[request.problem_name]
    record["lastCommitSha"] = commit_sha
    if request.difficulty:
        record["difficulty"] = request.difficulty
    store.set(STATS_KEY, stats)

    log.info("committed %d file(s) to %s@%s: %s", len(request.files), request.repo, request.branch, commit_sha)
    return commit_sha
