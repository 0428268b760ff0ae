# app/crud/teacher_crud.py
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.course_model import Course, CourseStatus
from app.models.teacher_model import ApplicationStatus, Teacher


def get_teacher(db: Session, teacher_id: int) -> Optional[Teacher]:
    """Lấy giáo viên theo ID."""
    return db.query(Teacher).filter(Teacher.id == teacher_id).first()


def get_teacher_by_user_id(db: Session, user_id: int) -> Optional[Teacher]:
    return db.query(Teacher).filter(Teacher.user_id == user_id).first()


def get_approved_teacher(db: Session, teacher_id: int) -> Optional[Teacher]:
    return (
        db.query(Teacher)
        .options(joinedload(Teacher.user))
        .filter(Teacher.id == teacher_id, Teacher.application_status == ApplicationStatus.approved)
        .first()
    )


def create_teacher(db: Session, user_id: int, data: dict) -> Teacher:
    db_teacher = Teacher(user_id=user_id, **data)
    db.add(db_teacher)
    db.flush()
    return db_teacher


def update_teacher(db: Session, db_teacher: Teacher, update_data: dict, commit: bool = True) -> Teacher:
    for key, value in update_data.items():
        setattr(db_teacher, key, value)
    db.add(db_teacher)
    if commit:
        db.commit()
        db.refresh(db_teacher)
    return db_teacher


def get_applications(
    db: Session, status: Optional[ApplicationStatus], skip: int = 0, limit: int = 10
) -> Tuple[List[Teacher], int]:
    query = db.query(Teacher).options(joinedload(Teacher.user))
    if status:
        query = query.filter(Teacher.application_status == status)
    total = query.count()
    items = (
        query.order_by(Teacher.application_submitted_at.desc(), Teacher.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return items, total


def get_published_courses(db: Session, teacher_id: int, skip: int = 0, limit: int = 10) -> Tuple[List[Course], int]:
    query = db.query(Course).filter(
        Course.teacher_id == teacher_id,
        Course.status == CourseStatus.published,
        Course.deleted_at.is_(None),
    )
    total = query.count()
    items = query.order_by(Course.created_at.desc()).offset(skip).limit(limit).all()
    return items, total


def refresh_course_count(db: Session, db_teacher: Teacher):
    """Cập nhật total_courses theo số khóa học đã xuất bản."""
    db_teacher.total_courses = db.query(func.count(Course.id)).filter(
        Course.teacher_id == db_teacher.id,
        Course.status == CourseStatus.published,
        Course.deleted_at.is_(None),
    ).scalar() or 0
