import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.config import LOG_LEVEL


def setup_logging(log_dir: str = "logs"):
    """
    Cấu hình logging cho toàn ứng dụng.
    - Console + file (logs/app.log), file được xoay vòng để không phình to.
    """
    path = Path(log_dir)
    path.mkdir(exist_ok=True)

    level = LOG_LEVEL.upper()
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    root = logging.getLogger()
    root.setLevel(level)

    # Tránh gắn handler hai lần khi reload
    if root.handlers:
        return

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))

    file_handler = RotatingFileHandler(
        path / "app.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))

    root.addHandler(console)
    root.addHandler(file_handler)

    logging.getLogger("apscheduler").setLevel(logging.INFO)
