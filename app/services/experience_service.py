# app/services/experience_service.py
"""
Hồ sơ bổ sung của giáo viên: kinh nghiệm làm việc, quá trình học tập, chứng chỉ.
Giáo viên đang chờ duyệt cũng được bổ sung để hoàn thiện hồ sơ.
"""
import logging
from typing import Dict, List, Type

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.exceptions import AppValidationError, ErrorCode, NotFoundError, PermissionDeniedError
from app.crud import experience_crud, teacher_crud
from app.crud.experience_crud import TeacherRecord
from app.models.certificate_model import TeacherCertificate
from app.models.experience_model import TeacherLearningExperience, TeacherWorkExperience
from app.models.teacher_model import Teacher

logger = logging.getLogger(__name__)

# model -> (mã lỗi không tìm thấy, tên hiển thị, cờ "đang diễn ra")
RECORD_TYPES = {
    TeacherWorkExperience: (ErrorCode.WORK_EXPERIENCE_NOT_FOUND, "kinh nghiệm làm việc", "is_working"),
    TeacherLearningExperience: (ErrorCode.LEARNING_EXPERIENCE_NOT_FOUND, "quá trình học tập", "is_in_school"),
    TeacherCertificate: (ErrorCode.CERTIFICATE_NOT_FOUND, "chứng chỉ", None),
}


def _get_teacher(db: Session, user_id: int) -> Teacher:
    teacher = teacher_crud.get_teacher_by_user_id(db, user_id)
    if not teacher:
        raise NotFoundError(ErrorCode.TEACHER_NOT_FOUND, "Không tìm thấy hồ sơ giáo viên")
    return teacher


def _get_owned_record(db: Session, user_id: int, model: Type[TeacherRecord], record_id: int) -> TeacherRecord:
    not_found_code, label, _ = RECORD_TYPES[model]
    record = experience_crud.get_record(db, model, record_id)
    if not record:
        raise NotFoundError(not_found_code, f"Không tìm thấy {label}")
    teacher = _get_teacher(db, user_id)
    if record.teacher_id != teacher.id:
        raise PermissionDeniedError(ErrorCode.TEACHER_RECORD_FORBIDDEN, f"Bạn không có quyền với {label} này")
    return record


def _normalize_period(values: Dict, current_flag: str) -> Dict:
    """
    Đang làm / đang học thì xóa thời điểm kết thúc,
    ngược lại bắt buộc có năm, tháng kết thúc và phải sau thời điểm bắt đầu.
    """
    if values.get(current_flag):
        values["end_year"] = None
        values["end_month"] = None
        return values

    errors: Dict[str, List[str]] = {}
    if values.get("end_year") is None:
        errors["end_year"] = ["Cần nhập năm kết thúc"]
    if values.get("end_month") is None:
        errors["end_month"] = ["Cần nhập tháng kết thúc"]
    if not errors:
        start = (values["start_year"], values["start_month"])
        end = (values["end_year"], values["end_month"])
        if end <= start:
            errors["end_date"] = ["Thời điểm kết thúc phải sau thời điểm bắt đầu"]
    if errors:
        raise AppValidationError(errors)
    return values


def list_records(db: Session, user_id: int, model: Type[TeacherRecord]) -> List[TeacherRecord]:
    teacher = _get_teacher(db, user_id)
    return experience_crud.get_records(db, model, teacher.id)


def create_record(db: Session, user_id: int, model: Type[TeacherRecord], data: BaseModel) -> TeacherRecord:
    teacher = _get_teacher(db, user_id)
    values = data.model_dump()
    current_flag = RECORD_TYPES[model][2]
    if current_flag:
        values = _normalize_period(values, current_flag)

    record = experience_crud.create_record(db, model, teacher.id, values)
    logger.info(f"Giáo viên id={teacher.id} thêm {RECORD_TYPES[model][1]} id={record.id}")
    return record


def update_record(
    db: Session, user_id: int, model: Type[TeacherRecord], record_id: int, data: BaseModel
) -> TeacherRecord:
    record = _get_owned_record(db, user_id, model, record_id)
    update_data = data.model_dump(exclude_unset=True)

    current_flag = RECORD_TYPES[model][2]
    if current_flag:
        # Kiểm tra trên trạng thái sau khi gộp với bản ghi hiện có
        merged = {
            field: update_data.get(field, getattr(record, field))
            for field in (current_flag, "start_year", "start_month", "end_year", "end_month")
        }
        merged = _normalize_period(merged, current_flag)
        update_data.update({"end_year": merged["end_year"], "end_month": merged["end_month"]})

    return experience_crud.update_record(db, record, update_data)


def delete_record(db: Session, user_id: int, model: Type[TeacherRecord], record_id: int):
    record = _get_owned_record(db, user_id, model, record_id)
    experience_crud.delete_record(db, record)
    logger.info(f"Đã xóa {RECORD_TYPES[model][1]} id={record_id}")
