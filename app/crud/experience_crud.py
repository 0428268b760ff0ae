# app/crud/experience_crud.py
"""
CRUD dùng chung cho các hồ sơ phụ của giáo viên:
kinh nghiệm làm việc, quá trình học tập và chứng chỉ.
"""
from typing import List, Optional, Type, Union

from sqlalchemy.orm import Session

from app.models.certificate_model import TeacherCertificate
from app.models.experience_model import TeacherLearningExperience, TeacherWorkExperience

TeacherRecord = Union[TeacherWorkExperience, TeacherLearningExperience, TeacherCertificate]


def get_record(db: Session, model: Type[TeacherRecord], record_id: int) -> Optional[TeacherRecord]:
    return db.query(model).filter(model.id == record_id).first()


def get_records(db: Session, model: Type[TeacherRecord], teacher_id: int) -> List[TeacherRecord]:
    query = db.query(model).filter(model.teacher_id == teacher_id)
    if model is TeacherCertificate:
        return query.order_by(model.created_at.desc(), model.id.desc()).all()
    # Kinh nghiệm mới nhất lên đầu
    return query.order_by(model.start_year.desc(), model.start_month.desc(), model.id.desc()).all()


def create_record(db: Session, model: Type[TeacherRecord], teacher_id: int, data: dict) -> TeacherRecord:
    db_record = model(teacher_id=teacher_id, **data)
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    return db_record


def update_record(db: Session, db_record: TeacherRecord, update_data: dict) -> TeacherRecord:
    for key, value in update_data.items():
        setattr(db_record, key, value)
    db.commit()
    db.refresh(db_record)
    return db_record


def delete_record(db: Session, db_record: TeacherRecord):
    db.delete(db_record)
    db.commit()
