"""
HTTP routes of the system agent.

Handlers stay thin: validation and dispatch live in SystemAgent; only the
response shapes the web client expects are decided here.
"""
import logging
import sys
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from veer.agent.auth import verify_agent_token
from veer.agent.service import SystemAgent
from veer.exceptions import CommandError

logger = logging.getLogger(__name__)

router = APIRouter()
guarded = APIRouter(dependencies=[Depends(verify_agent_token)])


class ActionRequest(BaseModel):
    action: Optional[str] = None


class LaunchRequest(BaseModel):
    type: Optional[str] = None
    target: Optional[str] = None


class KillProcessRequest(BaseModel):
    pid: Any = None


class MediaRequest(BaseModel):
    action: Optional[str] = None
    value: Any = None


def get_agent(request: Request) -> SystemAgent:
    return request.app.state.agent


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "VEER System Agent running"


@router.get("/health")
async def health():
    return {"status": "ok", "platform": sys.platform}


@guarded.post("/action")
async def perform_action(payload: Optional[ActionRequest] = None, agent: SystemAgent = Depends(get_agent)):
    payload = payload or ActionRequest()
    return await agent.perform_action(payload.action)


@guarded.post("/launch")
async def launch(payload: Optional[LaunchRequest] = None, agent: SystemAgent = Depends(get_agent)):
    payload = payload or LaunchRequest()
    try:
        return await agent.launch(payload.type, payload.target)
    except CommandError as e:
        return JSONResponse(status_code=500, content={"error": e.message, "message": e.stderr})


@guarded.get("/system-info")
async def system_info(agent: SystemAgent = Depends(get_agent)):
    return await agent.system_info()


@guarded.get("/gpu-info")
async def gpu_info(agent: SystemAgent = Depends(get_agent)):
    return await agent.gpu_info()


@guarded.get("/processes")
async def processes(limit: Optional[str] = Query(default=None), agent: SystemAgent = Depends(get_agent)):
    try:
        count = int(limit) if limit else 15
    except ValueError:
        count = 15
    return agent.processes(count if count > 0 else 15)


@guarded.get("/history")
async def history(agent: SystemAgent = Depends(get_agent)):
    return agent.history_snapshot()


@guarded.get("/temperature")
async def temperature(agent: SystemAgent = Depends(get_agent)):
    return await agent.temperature()


@guarded.post("/kill-process")
async def kill_process(payload: Optional[KillProcessRequest] = None, agent: SystemAgent = Depends(get_agent)):
    payload = payload or KillProcessRequest()
    return await agent.kill_process(payload.pid)


@guarded.post("/media")
async def media_control(payload: Optional[MediaRequest] = None, agent: SystemAgent = Depends(get_agent)):
    payload = payload or MediaRequest()
    try:
        return await agent.media_control(payload.action, payload.value)
    except CommandError as e:
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": e.message, "message": e.stderr},
        )


@guarded.get("/media")
async def now_playing(agent: SystemAgent = Depends(get_agent)):
    return await agent.now_playing()
