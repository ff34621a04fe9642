from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from ..crud import create_task, display_input
from ..db import get_session
from ..nlp.parser import parse_task
from ..schemas import ParsedTaskOut, TaskCreate, TaskOut

router = APIRouter()


class IngestIn(BaseModel):
    text: str = Field(..., min_length=1, max_length=1000)


@router.get("/preview", response_model=ParsedTaskOut)
def preview(text: str = Query(..., min_length=1, max_length=1000)):
    """Live preview while typing; nothing is stored."""
    return parse_task(text)


@router.post("", response_model=TaskOut)
async def ingest(payload: IngestIn, db: AsyncSession = Depends(get_session)):
    parsed = parse_task(payload.text)
    task = TaskCreate(
        title=parsed.title,
        assignee=parsed.assignee,
        due=parsed.due,
        priority=parsed.priority,
        original_input=display_input(parsed),
        # completed default applies (False)
    )
    return await create_task(db, task)
