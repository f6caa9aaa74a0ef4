from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

StatusValue = Literal["To Do", "In Progress", "Done"]


# -----------------------------
# Pydantic-схемы
# -----------------------------
class Credentials(BaseModel):
    # пустые и отсутствующие поля проверяет CredentialStore, чтобы сообщение было одно
    username: Optional[str] = None
    password: Optional[str] = None


class LoginCredentials(BaseModel):
    # при входе любое значение, кроме непустой строки, просто не совпадёт: 401, а не 400
    username: Any = None
    password: Any = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class AuthOut(BaseModel):
    user: UserOut
    token: str


class TaskCreate(BaseModel):
    # поле владельца в теле игнорируется: владелец берётся из токена
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[StatusValue] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[StatusValue] = None


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int = Field(serialization_alias="owner")
    title: str
    description: Optional[str] = None
    status: StatusValue
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class Message(BaseModel):
    message: str


class DescriptionRequest(BaseModel):
    title: Optional[str] = None


class DescriptionOut(BaseModel):
    description: str
