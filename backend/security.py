from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from passlib.context import CryptContext
import jwt

from .errors import TokenExpired, TokenInvalid

logger = logging.getLogger(__name__)

# -----------------------------
# Пароли
# -----------------------------
BCRYPT_ROUNDS = 10

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def configure_hashing(rounds: int):
    pwd_context.update(bcrypt__rounds=rounds)


def hash_password(password):
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password):
    # passlib сравнивает хэши за постоянное время
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify():
    """Тратит столько же времени, сколько настоящая проверка (для несуществующих пользователей)."""
    pwd_context.dummy_verify()


# -----------------------------
# JWT
# -----------------------------
class TokenIssuer:
    """Выпускает и проверяет подписанные bearer-токены.

    Отзыва токенов нет: выход из системы только удаляет токен на клиенте,
    поэтому токен действует до истечения срока.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256",
                 expires_delta: timedelta = timedelta(days=7)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, user_id: int, expires_delta: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self.expires_delta)
        to_encode = {"sub": str(user_id), "iat": now, "exp": expire}
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm],
                                 options={"require": ["exp", "sub"]})
        except jwt.ExpiredSignatureError:
            raise TokenExpired(reason="token expired")
        except jwt.InvalidTokenError as exc:
            raise TokenInvalid(reason=f"token invalid: {exc}")

        sub = payload["sub"]
        try:
            return int(sub)
        except (TypeError, ValueError):
            raise TokenInvalid(reason=f"token subject is not a user id: {sub!r}")
