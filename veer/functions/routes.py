"""
HTTP routes of the functions service: the two serverless functions plus a
REST surface over the table store.
"""
import logging
from typing import Any, Dict, List, Optional, Type

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from veer import models
from veer.exceptions import ServiceError, to_error_body
from veer.storage import TableStore

logger = logging.getLogger(__name__)

functions_router = APIRouter(prefix="/functions/v1")
rest_router = APIRouter(prefix="/rest/v1")


class ChatRequest(BaseModel):
    message: Optional[str] = None
    mode: Optional[str] = None
    history: Optional[List[Dict[str, Any]]] = None
    service: Optional[str] = "auto"
    location: Optional[str] = None
    query: Optional[str] = None


def _failure(exc: ServiceError, label: str) -> JSONResponse:
    logger.error(f"{label} error: {exc.message}", extra=exc.context)
    return JSONResponse(status_code=500, content=to_error_body(exc))


@functions_router.post("/veer-chat")
async def veer_chat(payload: ChatRequest, request: Request):
    try:
        return await request.app.state.chat.reply(
            payload.message,
            mode=payload.mode,
            history=payload.history,
            service=payload.service,
            location=payload.location,
            query=payload.query,
        )
    except ServiceError as e:
        return _failure(e, "Chat")


@functions_router.api_route("/update-daily-data", methods=["GET", "POST"])
async def update_daily_data(request: Request):
    force = False
    if request.method == "POST":
        try:
            body = await request.json()
        except ValueError:
            body = {}
        force = isinstance(body, dict) and body.get("force") is True
    try:
        return await request.app.state.daily.update(force=force)
    except ServiceError as e:
        return _failure(e, "Update daily data")


def get_store(request: Request) -> TableStore:
    return request.app.state.store


def register_table(
    table: str,
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    filter_field: Optional[str] = None,
) -> None:
    """Add list/get/create/update/delete routes for one table."""

    if filter_field:
        async def list_rows(
            request: Request,
            limit: Optional[int] = Query(default=None, ge=1),
            filter_value: Optional[str] = Query(default=None, alias=filter_field),
        ):
            return get_store(request).repository(table).list(limit=limit, **{filter_field: filter_value})
    else:
        async def list_rows(request: Request, limit: Optional[int] = Query(default=None, ge=1)):
            return get_store(request).repository(table).list(limit=limit)

    async def get_row(record_id: str, request: Request):
        return get_store(request).repository(table).get(record_id)

    async def create_row(payload: create_model, request: Request):  # type: ignore[valid-type]
        record = get_store(request).repository(table).create(payload.model_dump(exclude_none=True))
        return JSONResponse(status_code=201, content=record)

    async def update_row(record_id: str, payload: update_model, request: Request):  # type: ignore[valid-type]
        return get_store(request).repository(table).update(record_id, payload.model_dump(exclude_unset=True))

    async def delete_row(record_id: str, request: Request):
        get_store(request).repository(table).delete(record_id)
        return Response(status_code=204)

    rest_router.add_api_route(f"/{table}", list_rows, methods=["GET"], name=f"list_{table}")
    rest_router.add_api_route(f"/{table}/{{record_id}}", get_row, methods=["GET"], name=f"get_{table}")
    rest_router.add_api_route(f"/{table}", create_row, methods=["POST"], name=f"create_{table}")
    rest_router.add_api_route(f"/{table}/{{record_id}}", update_row, methods=["PATCH"], name=f"update_{table}")
    rest_router.add_api_route(f"/{table}/{{record_id}}", delete_row, methods=["DELETE"], name=f"delete_{table}")


register_table("sessions", models.SessionCreate, models.SessionUpdate)
register_table("messages", models.MessageCreate, models.MessageUpdate, filter_field="session_id")
register_table("notes", models.NoteCreate, models.NoteUpdate)
register_table("tasks", models.TaskCreate, models.TaskUpdate)
register_table("projects", models.ProjectCreate, models.ProjectUpdate)
register_table("daily_data", models.DailyDataCreate, models.DailyDataUpdate, filter_field="data_type")
