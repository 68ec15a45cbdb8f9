import base64
import json

import httpx
import pytest

from leethub.config import TOKEN_KEY
from leethub.store import MemoryStore

API = "https://api.github.com"


class FakeGitHub:
    """Git Data endpoints for one repo, backed by fixed SHAs.

    Every request is recorded in `calls` as (label, json_body, headers).
    """

    def __init__(self, repo="o/r", branch="main"):
        self.repo = repo
        self.branch = branch
        self.calls = []
        self.blobs = {}  # sha -> decoded text
        self.trees = {}  # sha -> request body
        self.commits = {"tip": {"tree": {"sha": "basetree"}}}
        self.ref_status = 200
        self.fail_on = None  # label that should answer 500

    def _label(self, request: httpx.Request) -> str:
        prefix = f"/repos/{self.repo}/git/"
        path = request.url.path
        assert path.startswith(prefix), path
        rest = path[len(prefix):]
        if request.method == "GET" and rest.startswith("ref/heads/"):
            return "ref-read"
        if request.method == "POST" and rest == "blobs":
            return "blob-create"
        if request.method == "GET" and rest.startswith("commits/"):
            return "commit-read"
        if request.method == "POST" and rest == "trees":
            return "tree-create"
        if request.method == "POST" and rest == "commits":
            return "commit-create"
        if request.method == "PATCH" and rest.startswith("refs/heads/"):
            return "ref-update"
        raise AssertionError(f"unexpected call {request.method} {path}")

    def handler(self, request: httpx.Request) -> httpx.Response:
        label = self._label(request)
        body = json.loads(request.content) if request.content else None
        self.calls.append((label, body, dict(request.headers)))

        if label == self.fail_on:
            return httpx.Response(500, json={"message": "boom"})

        if label == "ref-read":
            return httpx.Response(200, json={"ref": f"refs/heads/{self.branch}", "object": {"sha": "tip"}})
        if label == "blob-create":
            sha = f"blob{len(self.blobs) + 1}"
            self.blobs[sha] = base64.b64decode(body["content"]).decode("utf-8")
            return httpx.Response(201, json={"sha": sha})
        if label == "commit-read":
            sha = request.url.path.rsplit("/", 1)[-1]
            if sha not in self.commits:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"sha": sha, **self.commits[sha]})
        if label == "tree-create":
            self.trees["newtree"] = body
            return httpx.Response(201, json={"sha": "newtree"})
        if label == "commit-create":
            self.commits["newcommit"] = {"tree": {"sha": body["tree"]}, "parents": body["parents"]}
            return httpx.Response(201, json={"sha": "newcommit"})
        # ref-update
        if self.ref_status != 200:
            return httpx.Response(self.ref_status, json={"message": "Update is not a fast forward"})
        return httpx.Response(200, json={"object": {"sha": body["sha"]}})

    def labels(self):
        return [c[0] for c in self.calls]

    def body(self, label):
        return next(c[1] for c in self.calls if c[0] == label)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def store():
    return MemoryStore({TOKEN_KEY: "t0ken"})


@pytest.fixture
def payload():
    return {
        "repo": "o/r",
        "branch": "main",
        "problemName": "0001-two-sum",
        "directory": "d",
        "files": [
            {"filename": "README.md", "content": "# Hi"},
            {"filename": "sol.py", "content": "print(1)"},
        ],
        "difficulty": "Easy",
        "commitMsg": "Add 0001-two-sum",
    }
