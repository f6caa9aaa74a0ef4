import logging

from sqlalchemy import delete, desc
from sqlalchemy.orm import Session

from .errors import NotFound, ValidationError
from .models import TASK_STATUSES, Task, TaskStatus, utcnow

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "status")


def _check_title(title):
    if title is None or not str(title).strip():
        raise ValidationError("Title is required")


def _check_status(status):
    if status not in TASK_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(TASK_STATUSES)}")


# Integer-колонка: в Postgres это int4
MAX_TASK_ID = 2 ** 31 - 1


def _task_id(task_id):
    # нечисловой id или id вне диапазона колонки не может принадлежать ни одной задаче
    try:
        value = int(task_id)
    except (TypeError, ValueError):
        raise NotFound("Task not found", reason=f"malformed task id {task_id!r}")
    if not 0 < value <= MAX_TASK_ID:
        raise NotFound("Task not found", reason=f"task id out of range {task_id!r}")
    return value


class TaskStore:
    """Задачи пользователя. Каждая операция фильтруется по владельцу одним условием."""

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, task_id, owner_id):
        return self.db.query(Task).filter(Task.id == _task_id(task_id), Task.owner_id == owner_id)

    def create(self, owner_id, title, description=None, status=None) -> Task:
        _check_title(title)
        if status is None:
            status = TaskStatus.TODO.value
        _check_status(status)

        now = utcnow()
        task = Task(
            owner_id=owner_id,
            title=title,
            description=description,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        logger.debug("Создана задача %s пользователя %s", task.id, owner_id)
        return task

    def list_by_owner(self, owner_id):
        return (
            self.db.query(Task)
            .filter(Task.owner_id == owner_id)
            .order_by(desc(Task.created_at), desc(Task.id))
            .all()
        )

    def get_owned(self, task_id, owner_id) -> Task:
        task = self._owned(task_id, owner_id).first()
        if not task:
            raise NotFound("Task not found")
        return task

    def update_owned(self, task_id, owner_id, fields: dict) -> Task:
        task = self.get_owned(task_id, owner_id)

        changes = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
        if "title" in changes:
            _check_title(changes["title"])
        if "status" in changes:
            _check_status(changes["status"])

        for field, value in changes.items():
            setattr(task, field, value)
        task.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(task)
        logger.debug("Обновлена задача %s: %s", task.id, sorted(changes))
        return task

    def delete_owned(self, task_id, owner_id):
        result = self.db.execute(
            delete(Task).where(Task.id == _task_id(task_id), Task.owner_id == owner_id)
        )
        self.db.commit()
        if result.rowcount == 0:
            raise NotFound("Task not found")
        logger.debug("Удалена задача %s пользователя %s", task_id, owner_id)
