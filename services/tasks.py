import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlmodel import Session, func, select

from errors import NotFoundError, ValidationError
from models import Task, utc_now
from schemas import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

PRIORITIES = (1, 2, 3)
DEFAULT_PRIORITY = 3
TICK = timedelta(microseconds=1)


def _check_priority(priority: Optional[int]) -> None:
    if priority is not None and priority not in PRIORITIES:
        raise ValidationError("Priority must be 1, 2 or 3")


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC; naive values are taken to be UTC already"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _later_than(previous: Optional[datetime]) -> datetime:
    """Current time, nudged past previous so stamps never tie or go backwards"""
    now = utc_now()
    previous = _as_utc(previous)
    if previous is not None and now <= previous:
        return previous + TICK
    return now


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


class TaskService:
    """
    Task operations for a single owner

    Every query filters on both task id and owner id, so a task owned
    by someone else is indistinguishable from a missing one.
    """

    def __init__(self, session: Session, owner_id: str):
        self.session = session
        self.owner_id = owner_id

    def create(self, data: TaskCreate) -> Task:
        title = _strip(data.title)
        if not title:
            raise ValidationError("Task title is required")
        _check_priority(data.priority)

        task = Task(
            user_id=self.owner_id,
            title=title,
            description=_strip(data.description) or "",
            priority=data.priority if data.priority is not None else DEFAULT_PRIORITY,
            due_date=_as_utc(data.due_date),
            completed=bool(data.completed),
        )
        task.created_at = task.updated_at = _later_than(self._latest_created_at())

        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)

        logger.info("User %s created task %s", self.owner_id, task.id)
        return task

    def list(self) -> List[Task]:
        """All of the owner's tasks, newest first"""
        query = (
            select(Task)
            .where(Task.user_id == self.owner_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
        )
        return self.session.exec(query).all()

    def get(self, task_id: str) -> Task:
        task = self.session.exec(
            select(Task).where(Task.id == task_id, Task.user_id == self.owner_id)
        ).first()

        if not task:
            raise NotFoundError("Task not found")

        return task

    def update(self, task_id: str, data: TaskUpdate) -> Task:
        """
        Replace every editable field of a task

        Fields missing from the request are stored as null rather than
        left unchanged.
        """
        title = _strip(data.title)
        if data.title is not None and not title:
            raise ValidationError("Task title is required")
        _check_priority(data.priority)

        task = self.get(task_id)

        task.title = title
        task.description = _strip(data.description)
        task.priority = data.priority
        task.due_date = _as_utc(data.due_date)
        task.completed = data.completed
        task.updated_at = _later_than(task.updated_at)

        return self._save(task)

    def toggle(self, task_id: str) -> Task:
        task = self.get(task_id)

        task.completed = not task.completed
        task.updated_at = _later_than(task.updated_at)

        return self._save(task)

    def delete(self, task_id: str) -> None:
        task = self.get(task_id)

        self.session.delete(task)
        self.session.commit()

        logger.info("User %s deleted task %s", self.owner_id, task_id)

    def _latest_created_at(self) -> Optional[datetime]:
        return self.session.exec(
            select(func.max(Task.created_at)).where(Task.user_id == self.owner_id)
        ).one()

    def _save(self, task: Task) -> Task:
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task
