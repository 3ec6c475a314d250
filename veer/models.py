"""
Request bodies for the table REST surface.

Create models validate inserts; Update models carry only optional fields so a
PATCH can send any subset. ``model_dump(exclude_unset=True)`` is what the
repositories receive.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


Role = Literal["user", "assistant", "system"]
Priority = Literal["low", "medium", "high"]


class SessionCreate(BaseModel):
    mode: str = "helper"
    title: Optional[str] = None


class SessionUpdate(BaseModel):
    mode: Optional[str] = None
    title: Optional[str] = None


class MessageCreate(BaseModel):
    session_id: str = Field(..., min_length=1)
    role: Role
    content: str
    tool_used: Optional[str] = None


class MessageUpdate(BaseModel):
    content: Optional[str] = None
    tool_used: Optional[str] = None


class NoteCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str
    tags: List[str] = Field(default_factory=list)


class NoteUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = None
    tags: Optional[List[str]] = None


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    completed: bool = False
    priority: Optional[Priority] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None
    priority: Optional[Priority] = None


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    pinned: bool = False
    session_ids: List[str] = Field(default_factory=list)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    pinned: Optional[bool] = None
    session_ids: Optional[List[str]] = None


class DailyDataCreate(BaseModel):
    data_type: str = Field(..., min_length=1)
    title: str
    content: str
    source: Optional[str] = None
    source_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    fetched_at: Optional[datetime] = None


class DailyDataUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    source: Optional[str] = None
    source_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
