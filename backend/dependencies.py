import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .credentials import CredentialStore
from .database import get_db
from .errors import TokenInvalid, Unauthenticated
from .models import User
from .security import TokenIssuer
from .tasks import TaskStore

logger = logging.getLogger(__name__)

# auto_error=False: отсутствие заголовка обрабатываем сами, с тем же ответом 401
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_description_generator(request: Request):
    return request.app.state.description_generator


def get_credential_store(db: Session = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db)


def get_task_store(db: Session = Depends(get_db)) -> TaskStore:
    return TaskStore(db)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
    store: CredentialStore = Depends(get_credential_store),
) -> User:
    """Проверяет bearer-токен и возвращает пользователя.

    Клиент во всех случаях получает одинаковый 401 "Not authorized",
    конкретная причина пишется только в лог.
    """
    path = request.url.path
    if credentials is None:
        logger.warning("401 %s: нет bearer-токена", path)
        raise Unauthenticated(reason="no token")

    try:
        user_id = issuer.verify(credentials.credentials)
    except TokenInvalid as exc:
        logger.warning("401 %s: %s", path, exc.reason)
        raise Unauthenticated(reason=exc.reason)

    user = store.get(user_id)
    if user is None:
        logger.warning("401 %s: пользователь %s не найден", path, user_id)
        raise Unauthenticated(reason="user not found")
    return user
