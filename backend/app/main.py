import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .database import engine, async_session_factory
from .db_models import *
from .config import settings
from .auth.router import router as auth_router
from .users.router import router as users_router
from .posts.router import router as posts_router
from .categories.router import router as categories_router
from .comments.router import router as comments_router

# 로깅 설정 (Docker 환경 최적화)
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # stdout으로 명시적 출력
    ]
)

# 특정 모듈 로그 레벨 설정
logging.getLogger("app.posts.service").setLevel(log_level)
logging.getLogger("app.categories.service").setLevel(log_level)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
logger.info(f"Application starting with log level: {settings.LOG_LEVEL}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # 선택: 기본 카테고리 시드 (이미 존재하는 이름은 건너뜀)
    if settings.SEED_ON_STARTUP:
        from .seed import seed_default_categories

        try:
            async with async_session_factory() as session:
                await seed_default_categories(session)
        except Exception as e:
            logger.exception(f"Startup seed error: {e}")

    yield
    await engine.dispose()

app = FastAPI(title="Blog API", lifespan=lifespan)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(posts_router)
app.include_router(categories_router)
app.include_router(comments_router)

# 간단한 헬스 체크 엔드포인트 (프로덕션 헬스체크 용도)
@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
