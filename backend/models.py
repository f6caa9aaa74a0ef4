from datetime import datetime, timezone
import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .database import Base
from .security import hash_password, verify_password


class TaskStatus(str, enum.Enum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


TASK_STATUSES = tuple(s.value for s in TaskStatus)


def utcnow():
    # SQLite не хранит tzinfo, поэтому держим наивное UTC-время
    return datetime.now(timezone.utc).replace(tzinfo=None)


# -----------------------------
# Модели БД
# -----------------------------
class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    tasks = relationship("Task", back_populates="owner")

    # Хэш пересчитывается только при присвоении пароля,
    # изменение других полей его не трогает.
    @property
    def password(self):
        raise AttributeError("password is write-only")

    @password.setter
    def password(self, plain_password):
        self.password_hash = hash_password(plain_password)

    def check_password(self, plain_password) -> bool:
        return verify_password(plain_password, self.password_hash)

    def __repr__(self):
        return f"<User id={self.id} username={self.username!r}>"


class Task(Base):
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    status = Column(String, nullable=False, default=TaskStatus.TODO.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
    owner = relationship("User", back_populates="tasks")

    def __repr__(self):
        return f"<Task id={self.id} owner_id={self.owner_id} status={self.status!r}>"
