import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .errors import InvalidCredentials, ValidationError
from .models import User
from .security import dummy_verify

logger = logging.getLogger(__name__)


class CredentialStore:
    """Пользователи и их пароли. Пароль хранится только в виде bcrypt-хэша."""

    def __init__(self, db: Session):
        self.db = db

    def register(self, username, password) -> User:
        if not username or not password:
            raise ValidationError("Username and password are required")

        existing = self.db.query(User).filter(User.username == username).first()
        if existing:
            raise ValidationError("Username already exists")

        new_user = User(username=username, password=password)
        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            # параллельная регистрация того же имени
            self.db.rollback()
            raise ValidationError("Username already exists")
        self.db.refresh(new_user)
        logger.info("Зарегистрирован пользователь %s (id=%s)", new_user.username, new_user.id)
        return new_user

    def verify(self, username, password) -> User:
        user = None
        if isinstance(username, str) and username:
            user = self.db.query(User).filter(User.username == username).first()

        if user is None:
            dummy_verify()
            logger.info("Неудачный вход: пользователь %r не найден", username)
            raise InvalidCredentials()
        if not isinstance(password, str) or not password or not user.check_password(password):
            logger.info("Неудачный вход: неверный пароль для %r", username)
            raise InvalidCredentials()
        return user

    def get(self, user_id):
        return self.db.get(User, user_id)
