import logging
from datetime import datetime
from typing import Literal

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Task, to_local_naive
from .nlp.parser import ParsedTask
from .schemas import TaskCreate, TaskStats, TaskUpdate

logger = logging.getLogger(__name__)

TaskStatus = Literal["all", "completed", "pending", "overdue"]


def display_input(parsed: ParsedTask) -> str:
    """Rebuild a readable one-liner, e.g. 'Finish report by Alice 10/20/2026 P1'."""
    parts = [parsed.title]
    if parsed.assignee:
        parts.append(f"by {parsed.assignee}")
    if parsed.due:
        parts.append(f"{parsed.due.month}/{parsed.due.day}/{parsed.due.year}")
    parts.append(parsed.priority.value)
    return " ".join(parts)


def _overdue(now: datetime):
    return Task.completed.is_(False) & Task.due.is_not(None) & (Task.due < now)


def _is_overdue(task: Task, now: datetime) -> bool:
    # due loads as None when the stored text no longer parses
    return not task.completed and task.due is not None and task.due < now


async def create_task(db: AsyncSession, payload: TaskCreate) -> Task:
    data = payload.model_dump()
    data["due"] = to_local_naive(data.get("due"))
    task = Task(**data)
    db.add(task)
    await db.commit()
    await db.refresh(task)
    logger.info("Created task %s", task.id, extra={"priority": task.priority.value, "has_due": task.due is not None})
    return task


async def get_task(db: AsyncSession, task_id: str) -> Task | None:
    res = await db.execute(select(Task).where(Task.id == task_id))
    return res.scalar_one_or_none()


async def list_tasks(
    db: AsyncSession,
    status: TaskStatus = "all",
    q: str | None = None,
    now: datetime | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Task]:
    stmt = select(Task).order_by(Task.created_at.desc())
    if q:
        needle = f"%{q.strip()}%"
        stmt = stmt.where(or_(Task.title.ilike(needle), Task.assignee.ilike(needle)))
    if status == "completed":
        stmt = stmt.where(Task.completed.is_(True))
    elif status == "pending":
        stmt = stmt.where(Task.completed.is_(False))
    elif status == "overdue":
        now = now or datetime.now()
        res = await db.execute(stmt.where(_overdue(now)))
        overdue = [t for t in res.scalars().all() if _is_overdue(t, now)]
        return overdue[offset : offset + limit]
    stmt = stmt.limit(limit).offset(offset)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def task_stats(db: AsyncSession, now: datetime | None = None) -> TaskStats:
    now = now or datetime.now()
    total = await db.scalar(select(func.count(Task.id)))
    completed = await db.scalar(select(func.count(Task.id)).where(Task.completed.is_(True)))
    res = await db.execute(select(Task).where(_overdue(now)))
    overdue = sum(1 for t in res.scalars().all() if _is_overdue(t, now))
    return TaskStats(total=total, completed=completed, pending=total - completed, overdue=overdue)


async def update_task(db: AsyncSession, task_id: str, payload: TaskUpdate):
    task = await get_task(db, task_id)
    if not task:
        return None
    # explicit nulls only make sense for the due date
    updates = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None or k == "due"}
    if "due" in updates:
        updates["due"] = to_local_naive(updates["due"])
    for k, v in updates.items():
        setattr(task, k, v)
    await db.commit()
    await db.refresh(task)
    logger.info("Updated task %s", task.id, extra={"fields": sorted(updates)})
    return task


async def delete_task(db: AsyncSession, task_id: str) -> bool:
    task = await get_task(db, task_id)
    if not task:
        return False
    await db.delete(task)
    await db.commit()
    logger.info("Deleted task %s", task_id)
    return True
