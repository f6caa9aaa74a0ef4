from typing import List, Optional
import logging
import os

from fastapi import APIRouter, Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware

from .ai import OpenAIDescriptionGenerator
from .config import Settings
from .credentials import CredentialStore
from .database import init_db, make_engine, make_session_factory
from .dependencies import (
    get_credential_store,
    get_current_user,
    get_description_generator,
    get_task_store,
    get_token_issuer,
)
from .errors import ValidationError, register_error_handlers
from .logging_setup import setup_logging
from .models import User
from .schemas import (
    AuthOut,
    Credentials,
    DescriptionOut,
    DescriptionRequest,
    LoginCredentials,
    Message,
    TaskCreate,
    TaskOut,
    TaskUpdate,
    UserOut,
)
from .security import TokenIssuer, configure_hashing
from .tasks import TaskStore

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])
tasks_router = APIRouter(prefix="/tasks", tags=["tasks"])
ai_router = APIRouter(prefix="/ai", tags=["ai"])


# -----------------------------
# Эндпоинты аутентификации
# -----------------------------
def _auth_response(user: User, issuer: TokenIssuer):
    return {"user": UserOut.model_validate(user), "token": issuer.issue(user.id)}


@auth_router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def register(
    body: Credentials,
    store: CredentialStore = Depends(get_credential_store),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    new_user = store.register(body.username, body.password)
    return _auth_response(new_user, issuer)


@auth_router.post("/login", response_model=AuthOut)
def login(
    body: LoginCredentials,
    store: CredentialStore = Depends(get_credential_store),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    user = store.verify(body.username, body.password)
    return _auth_response(user, issuer)


# -----------------------------
# CRUD для задач
# -----------------------------
@tasks_router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    store: TaskStore = Depends(get_task_store),
    current_user: User = Depends(get_current_user),
):
    return store.create(current_user.id, task.title, task.description, task.status)


@tasks_router.get("", response_model=List[TaskOut])
def get_tasks(store: TaskStore = Depends(get_task_store), current_user: User = Depends(get_current_user)):
    return store.list_by_owner(current_user.id)


@tasks_router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: str, store: TaskStore = Depends(get_task_store),
             current_user: User = Depends(get_current_user)):
    return store.get_owned(task_id, current_user.id)


@tasks_router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: str,
    task_update: TaskUpdate,
    store: TaskStore = Depends(get_task_store),
    current_user: User = Depends(get_current_user),
):
    # null в поле означает "не менять"
    fields = task_update.model_dump(exclude_unset=True, exclude_none=True)
    return store.update_owned(task_id, current_user.id, fields)


@tasks_router.delete("/{task_id}", response_model=Message)
def delete_task(task_id: str, store: TaskStore = Depends(get_task_store),
                current_user: User = Depends(get_current_user)):
    store.delete_owned(task_id, current_user.id)
    return {"message": "Task deleted successfully"}


# -----------------------------
# Генерация описания
# -----------------------------
@ai_router.post("/generate-description", response_model=DescriptionOut)
def generate_description(body: DescriptionRequest, generator=Depends(get_description_generator)):
    if not body.title or not body.title.strip():
        raise ValidationError("Title is required")
    return {"description": generator.generate(body.title)}


# -----------------------------
# Инициализация приложения
# -----------------------------
def create_app(settings: Optional[Settings] = None, session_factory=None, description_generator=None) -> FastAPI:
    """Собирает приложение. Все зависимости процесса кладутся в app.state."""
    if settings is None:
        settings = Settings.from_env()
    setup_logging(settings.log_level)
    configure_hashing(settings.bcrypt_rounds)

    app = FastAPI(title="Tasks API")
    app.state.settings = settings

    if session_factory is None:
        engine = make_engine(settings.database_url)
        session_factory = make_session_factory(engine)
    app.state.engine = session_factory.kw["bind"]
    app.state.session_factory = session_factory

    app.state.token_issuer = TokenIssuer(
        settings.secret_key,
        algorithm=settings.algorithm,
        expires_delta=settings.access_token_expire,
    )
    if description_generator is None:
        description_generator = OpenAIDescriptionGenerator(settings.openai_api_key, settings.openai_model)
    app.state.description_generator = description_generator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(ai_router)

    @app.on_event("startup")
    def startup():
        # Автоматическая инициализация таблиц
        init_db(app.state.engine)
        logger.info("Таблицы готовы, БД: %s", app.state.engine.url.render_as_string(hide_password=True))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "5000")))
