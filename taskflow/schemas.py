from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .nlp.parser import Priority


def _upper_priority(v):
    # accept "p1" as well as "P1"
    return v.upper() if isinstance(v, str) else v


PriorityIn = Annotated[Priority, BeforeValidator(_upper_priority)]


class ParsedTaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    title: str
    assignee: str = ""
    due: datetime | None = None
    priority: Priority = Priority.P3


class TaskBase(BaseModel):
    # Serialize enums as their values (e.g., "P3")
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, max_length=280)
    assignee: str = Field("", max_length=120)
    due: datetime | None = None
    priority: PriorityIn = Priority.P3
    completed: bool = False


class TaskCreate(TaskBase):
    original_input: str | None = None


class TaskUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=280)
    assignee: str | None = Field(None, max_length=120)
    due: datetime | None = None
    priority: PriorityIn | None = None
    completed: bool | None = None


class TaskOut(TaskBase):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)
    id: str
    original_input: str | None = None
    created_at: datetime
    updated_at: datetime


class TaskStats(BaseModel):
    total: int
    completed: int
    pending: int
    overdue: int
