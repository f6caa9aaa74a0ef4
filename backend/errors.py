from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger(__name__)


# -----------------------------
# Доменные исключения
# -----------------------------
class AppError(Exception):
    """Базовая ошибка приложения: несёт HTTP-код и безопасное для клиента сообщение."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"

    def __init__(self, message: str = None, *, reason: str = None):
        self.message = message or self.message
        # reason попадает только в логи, клиенту не отдаётся
        self.reason = reason or self.message
        super().__init__(self.reason)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authorized"


class InvalidCredentials(Unauthenticated):
    message = "Invalid credentials"


class TokenInvalid(Unauthenticated):
    pass


class TokenExpired(TokenInvalid):
    pass


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class UpstreamFailure(AppError):
    message = "AI generation failed"


class InternalError(AppError):
    pass


# -----------------------------
# Обработчики для FastAPI
# -----------------------------
async def app_error_handler(request: Request, exc: AppError):
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=headers)


def _describe_validation(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.message
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Malformed JSON body"
    field = str(first.get("loc", ("body",))[-1])
    if first.get("type") == "missing":
        return f"{field.capitalize()} is required"
    if field == "status":
        return "Status must be one of: To Do, In Progress, Done"
    return f"Invalid value for {field}"


async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = _describe_validation(exc)
    logger.info("Отклонён запрос %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # ошибки самого фреймворка (нет маршрута, не тот метод) в том же формате
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # детали ошибки БД остаются только в логах
    logger.exception("Ошибка БД при обработке %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": InternalError.message},
    )


def register_error_handlers(app):
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
