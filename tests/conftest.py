from datetime import time, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.auth.auth import create_access_token, create_admin_token
from app.database import Base, get_db
from app.models.admin_model import AdminRole, AdminUser
from app.models.category_model import MainCategory, SubCategory
from app.models.city_model import City
from app.models.course_model import Course, CourseStatus
from app.models.price_option_model import CoursePriceOption
from app.models.purchase_model import UserCoursePurchase
from app.models.role_model import RoleEnum, UserRole
from app.models.schedule_model import TeacherAvailableSlot
from app.models.teacher_model import ApplicationStatus, Teacher
from app.models.user_model import User
from app.services.service_helper import utc_now
from main import app

# Cấu hình SQLite In-Memory (DB ảo)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "Password123"


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    # Request dùng chung session với fixture để dữ liệu chuẩn bị sẵn nhìn thấy được
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------
# FACTORIES
# ---------------------------------------------------------

def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(db):
    def _make_user(nick_name: str, roles=(RoleEnum.student,)) -> User:
        user = User(nick_name=nick_name, email=f"{nick_name}@mail.com")
        user.set_password(PASSWORD)
        db.add(user)
        db.flush()
        for role in roles:
            db.add(UserRole(user_id=user.id, role=role))
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture()
def student(make_user):
    return make_user("student")


@pytest.fixture()
def student_headers(student):
    return auth_headers(student)


@pytest.fixture()
def category(db):
    main = MainCategory(name="Lập trình", display_order=1)
    db.add(main)
    db.flush()
    sub = SubCategory(main_category_id=main.id, name="Backend", display_order=1)
    other_main = MainCategory(name="Âm nhạc", display_order=2)
    db.add_all([sub, other_main])
    db.flush()
    other_sub = SubCategory(main_category_id=other_main.id, name="Piano", display_order=2)
    db.add(other_sub)
    db.commit()
    return {"main": main, "sub": sub, "other_main": other_main, "other_sub": other_sub}


@pytest.fixture()
def city(db):
    city = City(city_code="TPE", city_name="台北市")
    db.add(city)
    db.commit()
    return city


@pytest.fixture()
def make_teacher(db, make_user, category):
    def _make_teacher(nick_name: str = "teacher", status=ApplicationStatus.approved) -> Teacher:
        roles = (RoleEnum.student, RoleEnum.teacher) if status == ApplicationStatus.approved \
            else (RoleEnum.student, RoleEnum.teacher_pending)
        user = make_user(nick_name, roles)
        teacher = Teacher(
            user_id=user.id,
            application_status=status,
            application_submitted_at=utc_now(),
            city="Taipei",
            district="Da'an",
            address="No. 1, Section 1",
            introduction="x" * 120,
            main_category_id=category["main"].id,
            sub_category_ids=[category["sub"].id],
        )
        db.add(teacher)
        db.commit()
        db.refresh(teacher)
        return teacher
    return _make_teacher


@pytest.fixture()
def teacher(make_teacher):
    return make_teacher()


@pytest.fixture()
def teacher_headers(teacher):
    return auth_headers(teacher.user)


@pytest.fixture()
def make_course(db, category, city):
    def _make_course(teacher: Teacher, status=CourseStatus.published, options=((1000, 10),), **fields) -> Course:
        course = Course(
            teacher_id=teacher.id,
            name=fields.pop("name", "Python cơ bản"),
            content="Nội dung khóa học",
            main_category_id=category["main"].id,
            sub_category_id=category["sub"].id,
            city_id=city.id,
            status=status,
            application_status=ApplicationStatus.approved if status == CourseStatus.published else None,
            **fields,
        )
        db.add(course)
        db.flush()
        for price, quantity in options:
            db.add(CoursePriceOption(course_id=course.id, price=Decimal(price), quantity=quantity))
        db.commit()
        db.refresh(course)
        return course
    return _make_course


@pytest.fixture()
def course(make_course, teacher):
    return make_course(teacher)


@pytest.fixture()
def open_slots(db, teacher):
    """Giáo viên rảnh 09:00-18:00 mọi ngày trong tuần."""
    for weekday in range(7):
        db.add(TeacherAvailableSlot(teacher_id=teacher.id, weekday=weekday, start_time=time(9), end_time=time(18)))
    db.commit()


@pytest.fixture()
def purchase(db, student, course):
    record = UserCoursePurchase(user_id=student.id, course_id=course.id, quantity_total=5, quantity_used=0)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture()
def future_date():
    return (utc_now() + timedelta(days=3)).date()


@pytest.fixture()
def admin(db):
    admin = AdminUser(username="admin", name="Super Admin", email="admin@mail.com", role=AdminRole.super_admin)
    admin.set_password("Admin@123456")
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture()
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_admin_token(admin)}"}
