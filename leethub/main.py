import asyncio
import logging
import os
import time
import uuid
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request

from . import tasks
from .config import STATS_KEY
from .tasks import TASKS

log = logging.getLogger("uvicorn.error")

app = FastAPI(title="leethub")

# In-memory job store
JOBS: Dict[str, Dict[str, Any]] = {}


def _now() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S%z")


def _require_api_key(req: Request):
    expect = os.getenv("X_API_KEY")
    given = req.headers.get("X-API-Key")
    if expect and given != expect:
        raise HTTPException(status_code=401, detail="Unauthorized")


@app.get("/health")
async def health():
    return {
        "ok": True,
        "tasks": sorted(TASKS.keys()),
        "time": time.time(),
    }


@app.get("/jobs")
async def list_jobs(req: Request):
    _require_api_key(req)
    # newest first
    return dict(reversed(list(JOBS.items())))


@app.get("/jobs/{job_id}")
async def get_job(job_id: str, req: Request):
    _require_api_key(req)
    if job_id not in JOBS:
        raise HTTPException(status_code=404, detail="job not found")
    return JOBS[job_id]


async def _run(job_id: str):
    job = JOBS[job_id]
    job["started_at"] = _now()
    try:
        job["result"] = await TASKS[job["task"]](job["payload"])
        job["status"] = "done"
        log.info("[jobs] %s done", job_id)
    except Exception as e:
        job["error"] = repr(e)
        job["status"] = "error"
        log.exception("[jobs] %s failed: %s", job_id, e)
    finally:
        job["finished_at"] = _now()


@app.post("/jobs/create")
async def create_job(req: Request):
    _require_api_key(req)
    body = await req.json()
    task_name = body.get("task")
    payload = body.get("payload", {})

    if task_name not in TASKS:
        raise HTTPException(status_code=400, detail=f"task '{task_name}' not available")

    job_id = str(uuid.uuid4())
    JOBS[job_id] = {
        "id": job_id,
        "task": task_name,
        "payload": payload,
        "status": "running",
        "created_at": _now(),
        "started_at": None,
        "finished_at": None,
        "result": None,
        "error": None,
    }
    asyncio.create_task(_run(job_id))
    return {"job_id": job_id}


@app.get("/stats/{problem_name}")
async def get_stats(problem_name: str, req: Request):
    _require_api_key(req)
    stats = tasks.STORE.get(STATS_KEY) or {}
    if problem_name not in stats:
        raise HTTPException(status_code=404, detail="no stats for problem")
    return stats[problem_name]
