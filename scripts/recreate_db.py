"""
Xóa và tạo lại toàn bộ bảng (chỉ dùng khi phát triển).

    python -m scripts.recreate_db [--seed]
"""
import argparse
import logging

from sqlalchemy import text

from app.database import Base, SessionLocal, engine
from app.logging_config import setup_logging
from app.models import *  # noqa: F401,F403
from scripts import seed_data

logger = logging.getLogger("recreate_db")


def drop_all_tables():
    # CASCADE để không phụ thuộc thứ tự khóa ngoại trên PostgreSQL
    table_names = [table.name for table in reversed(Base.metadata.sorted_tables)]
    with engine.connect() as connection:
        for table_name in table_names:
            try:
                connection.execute(text(f'DROP TABLE IF EXISTS "{table_name}" CASCADE'))
                connection.commit()
                logger.info(f"Đã xóa bảng {table_name}")
            except Exception:
                connection.rollback()
                logger.exception(f"Lỗi khi xóa bảng {table_name}")
                raise


def recreate_database(seed: bool = False):
    drop_all_tables()
    Base.metadata.create_all(bind=engine)
    logger.info(f"Đã tạo lại {len(Base.metadata.sorted_tables)} bảng")

    if seed:
        session = SessionLocal()
        try:
            seed_data.run(session)
        finally:
            session.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Xóa và tạo lại cơ sở dữ liệu")
    parser.add_argument("--seed", action="store_true", help="Khởi tạo dữ liệu nền sau khi tạo bảng")
    args = parser.parse_args()

    setup_logging()
    recreate_database(seed=args.seed)
