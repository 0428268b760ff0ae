# main.py
import logging
import time
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler # type: ignore
from apscheduler.triggers.interval import IntervalTrigger # type: ignore
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.api import api_router
from app.config import CORS_ORIGINS, RESERVATION_EXPIRATION_INTERVAL_MINUTES
from app.core.error_handlers import register_exception_handlers
from app.database import Base, SessionLocal, engine
from app.logging_config import setup_logging
from app.models import *  # noqa: F401,F403
from app.services import reservation_service

setup_logging()
logger = logging.getLogger(__name__)

# Tạo scheduler
scheduler = AsyncIOScheduler()


async def run_expire_reservations_task():
    """Hủy các lịch học đã quá hạn phản hồi, chạy định kỳ."""
    db = SessionLocal()
    try:
        reservation_service.expire_overdue(db)
    except Exception:
        logger.exception("Lỗi khi chạy tác vụ hủy lịch học quá hạn")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tạo tất cả các bảng trong cơ sở dữ liệu
    Base.metadata.create_all(bind=engine)

    scheduler.add_job(
        run_expire_reservations_task,
        trigger=IntervalTrigger(minutes=RESERVATION_EXPIRATION_INTERVAL_MINUTES),
        id="expire_reservation_job",
        name="Expire Pending Reservations",
    )
    scheduler.start()
    logger.info("Scheduler đã được khởi động.")

    yield

    scheduler.shutdown()
    logger.info("Scheduler đã tắt.")


app = FastAPI(
    title="Tutor Market API",
    description="API cho nền tảng kết nối giáo viên và học viên.",
    version="1.0.0",
    lifespan=lifespan,
)

# Cấu hình CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed:.1f}ms)")
    return response


register_exception_handlers(app)

# Bao gồm router chính của API v1
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"message": "Welcome to the Tutor Market API! Visit /docs for API documentation."}
