# tasky/main.py
from dotenv import load_dotenv

# .env를 settings/engine import 전에 로딩
load_dotenv()

import logging  # noqa: E402

from fastapi import APIRouter, FastAPI, HTTPException  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from sqlmodel import text  # noqa: E402

from tasky.core.config import settings  # noqa: E402
from tasky.core.logging_config import setup_logging  # noqa: E402
from tasky.db.session import engine  # noqa: E402
from tasky.errors import register_error_handlers  # noqa: E402

# 모델 모듈 임포트(테이블 등록 보장용)
from tasky.models import user as _m_user  # noqa: F401,E402
from tasky.models import task as _m_task  # noqa: F401,E402

# 라우터
from tasky.routers import auth, task, user  # noqa: E402

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Tasky API",
    version=settings.app_version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

api = APIRouter(prefix="/api")
api.include_router(auth.auth_router)
api.include_router(task.router)
api.include_router(user.user_router)
app.include_router(api)


@app.get("/health")
def health_app():
    return {"ok": True}


@app.get("/health/db")
def health_db():
    # Migration is a deployment concern. Runtime only verifies DB connectivity.
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"ok": True}
    except Exception:
        logger.exception("database health check failed")
        raise HTTPException(status_code=500, detail="Database connection failed")
