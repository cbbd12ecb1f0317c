# app/main.py

"""
DFMS FastAPI 애플리케이션의 진입점입니다.

- 로깅 설정, 수명 주기(테이블 생성, ARQ Redis 풀, 엔진 정리)
- `{"error": ...}` 형태의 공통 오류 응답 핸들러
- 도메인 라우터 등록과 루트/헬스 체크 엔드포인트
- ARQ 워커 설정 (`arq app.main.ArqWorkerSettings`)
"""

from typing import AsyncGenerator
from contextlib import asynccontextmanager
import logging

from arq.connections import create_pool, RedisSettings
from redis.exceptions import RedisError
from fastapi import FastAPI, Depends, Request, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import API_PREFIX
from app.core.config import settings
from app.core.database import engine, create_db_and_tables
from app.core import dependencies as deps
from app.core.envelope import describe_validation_errors

# 태스크 모듈 임포트
from app.core import tasks as core_tasks
from app.domains.usr import tasks as usr_tasks

# 도메인 라우터 임포트
from app.domains.usr.routers import router as usr_router
from app.domains.loc.routers import router as loc_router
from app.domains.fms.routers import router as fms_router
from app.domains.mnt.routers import router as mnt_router
from app.domains.shared.routers import router as shared_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    usr_tasks.send_magic_link_email_task,
]


# ARQ 워커 설정 클래스
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    jobs = [
        {
            'name': 'daily_db_health_check',
            'function': 'app.core.tasks.health_check_database_task',
            'cron': '0 0 * * *',
            'timeout': 300,
            'keep_result': 600,
        },
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스, ARQ Redis)를 함께 처리합니다.
    Redis에 연결할 수 없으면 풀 없이 시작하고, 매직링크 발송은 로그로만 남깁니다.
    """
    logger.info("%s %s 시작 중 (env=%s)", settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV)

    if settings.AUTO_CREATE_TABLES:
        await create_db_and_tables()

    app.state.redis = None
    try:
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("ARQ Redis 커넥션 풀 생성 완료.")
    except (OSError, RedisError) as e:
        logger.warning("ARQ Redis 커넥션 풀을 만들 수 없습니다: %s", e)

    yield  # 애플리케이션 실행

    logger.info("애플리케이션 종료 중...")
    if app.state.redis is not None:
        await app.state.redis.close()
        logger.info("ARQ Redis 연결 풀 종료 완료.")
    await engine.dispose()
    logger.info("데이터베이스 연결 풀 종료 완료.")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description="Drone Fleet Maintenance System (DFMS) API for fleets, assets, inspections and maintenance compliance.",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# -- CORS 미들웨어 설정 --
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -- 공통 오류 응답 핸들러: 모든 오류를 {"error": <message>} 로 반환 --
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": describe_validation_errors(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# -- 도메인 라우터 포함 --
app.include_router(usr_router, prefix=f"{API_PREFIX}/usr")
app.include_router(loc_router, prefix=f"{API_PREFIX}/loc")
app.include_router(fms_router, prefix=f"{API_PREFIX}/fms")
app.include_router(mnt_router, prefix=f"{API_PREFIX}/mnt")
app.include_router(shared_router, prefix=f"{API_PREFIX}/shared")


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    DFMS API의 루트 엔드포인트입니다.
    """
    return {"message": "Welcome to DFMS API. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(deps.get_db_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    result = await session.execute(select(1))
    if result.scalar_one_or_none() != 1:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database health check failed: No result from test query"
        )
    return {"status": "ok", "database_connection": "successful"}
