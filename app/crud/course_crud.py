# app/crud/course_crud.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from app.models.course_model import Course, CourseStatus
from app.models.price_option_model import CoursePriceOption
from app.models.teacher_model import ApplicationStatus, Teacher
from app.models.user_model import User

logger = logging.getLogger(__name__)


def get_course(db: Session, course_id: int) -> Optional[Course]:
    """Lấy khóa học chưa bị xóa theo ID."""
    return db.query(Course).filter(Course.id == course_id, Course.deleted_at.is_(None)).first()


def get_course_by_uuid(db: Session, course_uuid: str) -> Optional[Course]:
    return db.query(Course).filter(Course.uuid == course_uuid, Course.deleted_at.is_(None)).first()


def get_published_course(db: Session, course_id: int) -> Optional[Course]:
    return (
        db.query(Course)
        .options(joinedload(Course.teacher).joinedload(Teacher.user))
        .filter(
            Course.id == course_id,
            Course.status == CourseStatus.published,
            Course.deleted_at.is_(None),
        )
        .first()
    )


def get_teacher_courses(
    db: Session, teacher_id: int, status: Optional[CourseStatus] = None, skip: int = 0, limit: int = 10
) -> Tuple[List[Course], int]:
    query = db.query(Course).filter(Course.teacher_id == teacher_id, Course.deleted_at.is_(None))
    if status:
        query = query.filter(Course.status == status)
    total = query.count()
    items = query.order_by(Course.created_at.desc(), Course.id.desc()).offset(skip).limit(limit).all()
    return items, total


def create_course(db: Session, teacher_id: int, data: dict, price_options: List[dict]) -> Course:
    db_course = Course(teacher_id=teacher_id, status=CourseStatus.draft, **data)
    db.add(db_course)
    db.flush()
    for option in price_options:
        db.add(CoursePriceOption(course_id=db_course.id, **option))
    db.commit()
    db.refresh(db_course)
    return db_course


def update_course(db: Session, db_course: Course, update_data: dict) -> Course:
    for key, value in update_data.items():
        setattr(db_course, key, value)
    db.add(db_course)
    db.commit()
    db.refresh(db_course)
    return db_course


def _min_price_subquery(db: Session):
    return (
        db.query(
            CoursePriceOption.course_id.label("course_id"),
            func.min(CoursePriceOption.price).label("min_price"),
        )
        .filter(CoursePriceOption.is_active == True)  # noqa: E712
        .group_by(CoursePriceOption.course_id)
        .subquery()
    )


def get_public_courses(
    db: Session,
    keyword: Optional[str] = None,
    main_category_id: Optional[int] = None,
    sub_category_id: Optional[int] = None,
    city_id: Optional[int] = None,
    sort: str = "newest",
    skip: int = 0,
    limit: int = 10,
) -> Tuple[List[tuple], int]:
    """
    Danh sách khóa học đã xuất bản kèm giá thấp nhất và tên giáo viên.
    Trả về (các dòng (Course, min_price, teacher_name), tổng số).
    """
    min_price = _min_price_subquery(db)
    query = (
        db.query(Course, min_price.c.min_price, User.nick_name)
        .join(Teacher, Course.teacher_id == Teacher.id)
        .join(User, Teacher.user_id == User.id)
        .outerjoin(min_price, min_price.c.course_id == Course.id)
        .filter(Course.status == CourseStatus.published, Course.deleted_at.is_(None))
    )
    if keyword:
        pattern = f"%{keyword}%"
        query = query.filter(or_(Course.name.ilike(pattern), Course.content.ilike(pattern)))
    if main_category_id:
        query = query.filter(Course.main_category_id == main_category_id)
    if sub_category_id:
        query = query.filter(Course.sub_category_id == sub_category_id)
    if city_id:
        query = query.filter(Course.city_id == city_id)

    total = query.count()

    order_map = {
        "newest": [Course.created_at.desc()],
        "popular": [Course.purchase_count.desc(), Course.view_count.desc()],
        "rating": [Course.rate.desc(), Course.review_count.desc()],
        "price_low": [min_price.c.min_price.asc()],
        "price_high": [min_price.c.min_price.desc()],
    }
    query = query.order_by(*order_map.get(sort, order_map["newest"]), Course.id.desc())
    return query.offset(skip).limit(limit).all(), total


def increment_view_count(db: Session, db_course: Course):
    db_course.view_count = (db_course.view_count or 0) + 1
    db.commit()
    db.refresh(db_course)


def get_pending_courses(db: Session, skip: int = 0, limit: int = 10) -> Tuple[List[Course], int]:
    query = db.query(Course).filter(
        Course.application_status == ApplicationStatus.pending,
        Course.deleted_at.is_(None),
    )
    total = query.count()
    items = query.order_by(Course.updated_at.asc()).offset(skip).limit(limit).all()
    return items, total
