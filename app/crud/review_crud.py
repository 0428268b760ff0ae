# app/crud/review_crud.py
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.review_model import Review


def get_review_by_reservation(db: Session, reservation_id: int) -> Optional[Review]:
    return db.query(Review).filter(Review.reservation_id == reservation_id).first()


def get_reviews(
    db: Session,
    *,
    course_id: Optional[int] = None,
    user_id: Optional[int] = None,
    teacher_id: Optional[int] = None,
    rating: Optional[int] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    skip: int = 0,
    limit: int = 10,
) -> Tuple[List[Review], int]:
    query = db.query(Review).filter(Review.is_active == True)  # noqa: E712
    if course_id is not None:
        query = query.filter(Review.course_id == course_id)
    if user_id is not None:
        query = query.filter(Review.user_id == user_id)
    if teacher_id is not None:
        query = query.filter(Review.teacher_id == teacher_id)
    if rating:
        query = query.filter(Review.rate == rating)

    total = query.count()
    column = Review.rate if sort_by == "rating" else Review.created_at
    ordering = column.asc() if sort_order == "asc" else column.desc()
    items = (
        query.options(joinedload(Review.user), joinedload(Review.course))
        .order_by(ordering, Review.created_at.desc(), Review.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return items, total


def rating_summary(db: Session, **filters) -> Tuple[float, int]:
    """(điểm trung bình, số đánh giá) của các đánh giá đang hoạt động."""
    query = db.query(func.avg(Review.rate), func.count(Review.id)).filter(Review.is_active == True)  # noqa: E712
    for key, value in filters.items():
        query = query.filter(getattr(Review, key) == value)
    average, count = query.one()
    return float(average or 0), int(count or 0)


def rating_distribution(db: Session, course_id: int) -> Dict[str, int]:
    rows = (
        db.query(Review.rate, func.count(Review.id))
        .filter(Review.course_id == course_id, Review.is_active == True)  # noqa: E712
        .group_by(Review.rate)
        .all()
    )
    counts = {rate: count for rate, count in rows}
    return {str(star): int(counts.get(star, 0)) for star in range(5, 0, -1)}
