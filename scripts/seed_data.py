"""
Khởi tạo dữ liệu nền: danh mục chính, chuyên môn, thành phố và tài khoản super admin.

Chạy từ thư mục gốc của project:
    python -m scripts.seed_data
"""
import logging

from sqlalchemy.orm import Session

from app.config import SUPER_ADMIN_EMAIL, SUPER_ADMIN_PASSWORD, SUPER_ADMIN_USERNAME
from app.database import Base, SessionLocal, engine
from app.logging_config import setup_logging
from app.models import *  # noqa: F401,F403
from app.models.admin_model import AdminRole, AdminUser
from app.models.category_model import MainCategory, SubCategory
from app.models.city_model import City

logger = logging.getLogger("seed_data")

MAIN_CATEGORIES = [
    ("Lập trình", "https://example.com/icons/programming.png"),
    ("Ngoại ngữ", "https://example.com/icons/language.png"),
    ("Âm nhạc", "https://example.com/icons/music.png"),
    ("Thể thao", "https://example.com/icons/fitness.png"),
    ("Học thuật", "https://example.com/icons/academic.png"),
    ("Mỹ thuật", "https://example.com/icons/design.png"),
    ("Kỹ năng sống", "https://example.com/icons/lifestyle.png"),
    ("Kinh doanh", "https://example.com/icons/business.png"),
]

SUB_CATEGORIES = {
    "Lập trình": ["Frontend", "Backend", "Mobile App", "Khoa học dữ liệu", "Trí tuệ nhân tạo", "DevOps"],
    "Ngoại ngữ": ["Tiếng Anh", "Tiếng Nhật", "Tiếng Hàn", "Tiếng Trung", "Tiếng Đức", "Tiếng Pháp", "Tiếng Tây Ban Nha"],
    "Âm nhạc": ["Piano", "Guitar điện", "Trống", "Saxophone", "Bass", "Ukulele"],
    "Thể thao": ["Yoga", "Tập tạ", "Aerobic", "Bơi lội", "Chạy bộ", "Võ thuật"],
    "Học thuật": ["Toán", "Vật lý", "Hóa học", "Sinh học", "Lịch sử", "Địa lý", "Ngữ văn"],
    "Mỹ thuật": ["Màu nước", "Sơn dầu", "Ký họa", "Truyện tranh", "Minh họa", "Vẽ kỹ thuật số"],
    "Kỹ năng sống": ["Đan len", "Thêu", "Gốm", "Mộc", "Nấu ăn"],
    "Kinh doanh": ["Marketing", "Quản lý tài chính", "Quản lý dự án", "Thuyết trình", "Bán hàng", "Khởi nghiệp"],
}

CITIES = [
    ("TPE", "台北市"), ("TPH", "新北市"), ("TYC", "桃園市"), ("HSC", "新竹市"),
    ("HSH", "新竹縣"), ("MLI", "苗栗縣"), ("TXG", "台中市"), ("CWH", "彰化縣"),
    ("NTO", "南投縣"), ("YLI", "雲林縣"), ("CHY", "嘉義市"), ("CYI", "嘉義縣"),
    ("TNN", "台南市"), ("KHH", "高雄市"), ("PTS", "屏東縣"), ("TTT", "台東縣"),
    ("HWA", "花蓮縣"), ("ILA", "宜蘭縣"), ("KMN", "金門縣"), ("LNN", "連江縣"),
    ("PEH", "澎湖縣"),
]


def seed_main_categories(db: Session) -> int:
    if db.query(MainCategory).count() > 0:
        logger.info("Danh mục chính đã tồn tại, bỏ qua")
        return 0
    for order, (name, icon_url) in enumerate(MAIN_CATEGORIES, start=1):
        db.add(MainCategory(name=name, icon_url=icon_url, display_order=order))
    db.flush()
    return len(MAIN_CATEGORIES)


def seed_sub_categories(db: Session) -> int:
    if db.query(SubCategory).count() > 0:
        logger.info("Chuyên môn đã tồn tại, bỏ qua")
        return 0
    created = 0
    for main in db.query(MainCategory).order_by(MainCategory.display_order).all():
        for name in SUB_CATEGORIES.get(main.name, []):
            created += 1
            db.add(SubCategory(main_category_id=main.id, name=name, display_order=created))
    db.flush()
    return created


def seed_cities(db: Session) -> int:
    if db.query(City).count() > 0:
        logger.info("Thành phố đã tồn tại, bỏ qua")
        return 0
    for code, name in CITIES:
        db.add(City(city_code=code, city_name=name))
    db.flush()
    return len(CITIES)


def seed_super_admin(db: Session) -> int:
    if db.query(AdminUser).filter(AdminUser.username == SUPER_ADMIN_USERNAME).first():
        logger.info("Tài khoản super admin đã tồn tại, bỏ qua")
        return 0
    admin = AdminUser(
        username=SUPER_ADMIN_USERNAME,
        name="Super Admin",
        email=SUPER_ADMIN_EMAIL,
        role=AdminRole.super_admin,
    )
    admin.set_password(SUPER_ADMIN_PASSWORD)
    db.add(admin)
    db.flush()
    return 1


def run(db: Session):
    try:
        counts = {
            "main_categories": seed_main_categories(db),
            "sub_categories": seed_sub_categories(db),
            "cities": seed_cities(db),
            "admins": seed_super_admin(db),
        }
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Khởi tạo dữ liệu thất bại, đã rollback")
        raise
    for name, count in counts.items():
        logger.info(f"{name}: tạo mới {count}")
    return counts


if __name__ == "__main__":
    setup_logging()
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        run(session)
    finally:
        session.close()
