from typing import Any, Dict

from .committer import CommitRequest, commit_solution_files
from .store import JsonFileStore, KeyValueStore

# Process-wide store (token + stats). Swapped out in tests.
STORE: KeyValueStore = JsonFileStore()


async def task_commit_solution(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    payload: see CommitRequest.from_payload
    """
    req = CommitRequest.from_payload(payload or {})
    sha = await commit_solution_files(req, store=STORE)
    return {
        "ok": True,
        "repo": req.repo,
        "branch": req.branch,
        "problem": req.problem_name,
        "commit": sha,
        "paths": [f"{req.directory.rstrip('/')}/{f.filename}" for f in req.files],
    }


# ---- Registry ----
TASKS = {
    "commit_solution": task_commit_solution,
}
