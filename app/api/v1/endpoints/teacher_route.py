# app/api/v1/endpoints/teacher_route.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth.auth import get_current_active_user, has_roles
from app.models.certificate_model import TeacherCertificate
from app.models.experience_model import TeacherLearningExperience, TeacherWorkExperience
from app.schemas import course_schema, experience_schema, schedule_schema, teacher_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.schemas.common_schema import ApiResponse, MessageResponse, success
from app.services import experience_service, schedule_service, teacher_service

router = APIRouter()

# Dependency cho quyền truy cập của giáo viên đã được duyệt
TEACHER_ONLY = has_roles(["teacher"])


# ---------------------------------------------------------
# ĐƠN ĐĂNG KÝ GIÁO VIÊN
# ---------------------------------------------------------

@router.post(
    "/apply",
    response_model=ApiResponse[teacher_schema.TeacherApplicationRead],
    status_code=status.HTTP_201_CREATED,
    summary="Nộp đơn đăng ký làm giáo viên",
)
def apply_teacher(
    data: teacher_schema.TeacherApplicationCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    """
    Quyền truy cập: **student** đang hoạt động, chưa từng nộp đơn.
    """
    teacher = teacher_service.apply(db, current_user.user_id, data)
    return success(teacher_schema.TeacherApplicationRead.model_validate(teacher), "Nộp đơn thành công")


@router.get(
    "/application",
    response_model=ApiResponse[teacher_schema.TeacherApplicationRead],
    summary="Xem đơn đăng ký giáo viên của tôi",
)
def get_application(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    teacher = teacher_service.get_application(db, current_user.user_id)
    return success(teacher_schema.TeacherApplicationRead.model_validate(teacher), "Lấy đơn đăng ký thành công")


@router.put(
    "/application",
    response_model=ApiResponse[teacher_schema.TeacherApplicationRead],
    summary="Cập nhật đơn đăng ký giáo viên",
)
def update_application(
    data: teacher_schema.TeacherApplicationUpdate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    teacher = teacher_service.update_application(db, current_user.user_id, data)
    return success(teacher_schema.TeacherApplicationRead.model_validate(teacher), "Cập nhật đơn đăng ký thành công")


@router.post(
    "/resubmit",
    response_model=ApiResponse[teacher_schema.TeacherApplicationRead],
    summary="Nộp lại đơn đăng ký bị từ chối",
)
def resubmit_application(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    teacher = teacher_service.resubmit(db, current_user.user_id)
    return success(teacher_schema.TeacherApplicationRead.model_validate(teacher), "Nộp lại đơn thành công")


# ---------------------------------------------------------
# HỒ SƠ GIÁO VIÊN
# ---------------------------------------------------------

@router.get(
    "/profile",
    response_model=ApiResponse[teacher_schema.TeacherProfileRead],
    summary="Xem hồ sơ giáo viên",
    dependencies=[Depends(TEACHER_ONLY)],
)
def get_teacher_profile(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    teacher = teacher_service.get_profile(db, current_user.user_id)
    return success(teacher_schema.TeacherProfileRead.model_validate(teacher), "Lấy hồ sơ giáo viên thành công")


@router.put(
    "/profile",
    response_model=ApiResponse[teacher_schema.TeacherProfileRead],
    summary="Cập nhật hồ sơ giáo viên",
    dependencies=[Depends(TEACHER_ONLY)],
)
def update_teacher_profile(
    data: teacher_schema.TeacherProfileUpdate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    teacher = teacher_service.update_profile(db, current_user.user_id, data)
    return success(teacher_schema.TeacherProfileRead.model_validate(teacher), "Cập nhật hồ sơ giáo viên thành công")


# ---------------------------------------------------------
# LỊCH DẠY
# ---------------------------------------------------------

@router.get(
    "/schedule",
    response_model=ApiResponse[schedule_schema.ScheduleRead],
    summary="Xem các khung giờ rảnh",
    dependencies=[Depends(TEACHER_ONLY)],
)
def get_schedule(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    return success(schedule_service.get_schedule(db, current_user.user_id), "Lấy lịch dạy thành công")


@router.put(
    "/schedule",
    response_model=ApiResponse[schedule_schema.ScheduleUpdateResult],
    summary="Thay thế toàn bộ khung giờ rảnh",
    dependencies=[Depends(TEACHER_ONLY)],
)
def update_schedule(
    data: schedule_schema.ScheduleUpdateRequest,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    return success(schedule_service.update_schedule(db, current_user.user_id, data), "Cập nhật lịch dạy thành công")


@router.get(
    "/schedule/conflicts",
    response_model=ApiResponse[schedule_schema.ConflictCheckResult],
    summary="Kiểm tra xung đột giữa lịch dạy và các buổi đã đặt",
    dependencies=[Depends(TEACHER_ONLY)],
)
def check_schedule_conflicts(
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    slot_ids: Optional[List[int]] = Query(None),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    result = schedule_service.check_conflicts(db, current_user.user_id, from_date, to_date, slot_ids)
    return success(result, "Kiểm tra xung đột hoàn tất")


@router.get(
    "/schedule/weekly",
    response_model=ApiResponse[schedule_schema.WeeklyScheduleRead],
    summary="Xem lịch tuần",
    dependencies=[Depends(TEACHER_ONLY)],
)
def get_weekly_schedule(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    return success(schedule_service.get_weekly_schedule(db, current_user.user_id), "Lấy lịch tuần thành công")


@router.put(
    "/schedule/weekly",
    response_model=ApiResponse[schedule_schema.WeeklyScheduleRead],
    summary="Cập nhật lịch tuần theo khung giờ chuẩn",
    dependencies=[Depends(TEACHER_ONLY)],
)
def update_weekly_schedule(
    data: schedule_schema.WeeklyScheduleRequest,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    result = schedule_service.update_weekly_schedule(db, current_user.user_id, data)
    return success(result, "Cập nhật lịch tuần thành công")


# ---------------------------------------------------------
# KINH NGHIỆM LÀM VIỆC
# ---------------------------------------------------------

@router.get(
    "/work-experiences",
    response_model=ApiResponse[List[experience_schema.WorkExperienceRead]],
    summary="Danh sách kinh nghiệm làm việc",
)
def list_work_experiences(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    records = experience_service.list_records(db, current_user.user_id, TeacherWorkExperience)
    return success(records, "Lấy kinh nghiệm làm việc thành công")


@router.post(
    "/work-experiences",
    response_model=ApiResponse[experience_schema.WorkExperienceRead],
    status_code=status.HTTP_201_CREATED,
    summary="Thêm kinh nghiệm làm việc",
)
def create_work_experience(
    data: experience_schema.WorkExperienceCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    """
    Khi `is_working = false` cần có `end_year`, `end_month` và phải sau thời điểm bắt đầu.
    """
    record = experience_service.create_record(db, current_user.user_id, TeacherWorkExperience, data)
    return success(record, "Thêm kinh nghiệm làm việc thành công")


@router.put(
    "/work-experiences/{record_id}",
    response_model=ApiResponse[experience_schema.WorkExperienceRead],
    summary="Cập nhật kinh nghiệm làm việc",
)
def update_work_experience(
    record_id: int,
    data: experience_schema.WorkExperienceUpdate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    record = experience_service.update_record(db, current_user.user_id, TeacherWorkExperience, record_id, data)
    return success(record, "Cập nhật kinh nghiệm làm việc thành công")


@router.delete("/work-experiences/{record_id}", response_model=MessageResponse, summary="Xóa kinh nghiệm làm việc")
def delete_work_experience(
    record_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    experience_service.delete_record(db, current_user.user_id, TeacherWorkExperience, record_id)
    return {"status": "success", "message": "Đã xóa kinh nghiệm làm việc"}


# ---------------------------------------------------------
# QUÁ TRÌNH HỌC TẬP
# ---------------------------------------------------------

@router.get(
    "/learning-experiences",
    response_model=ApiResponse[List[experience_schema.LearningExperienceRead]],
    summary="Danh sách quá trình học tập",
)
def list_learning_experiences(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    records = experience_service.list_records(db, current_user.user_id, TeacherLearningExperience)
    return success(records, "Lấy quá trình học tập thành công")


@router.post(
    "/learning-experiences",
    response_model=ApiResponse[experience_schema.LearningExperienceRead],
    status_code=status.HTTP_201_CREATED,
    summary="Thêm quá trình học tập",
)
def create_learning_experience(
    data: experience_schema.LearningExperienceCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    record = experience_service.create_record(db, current_user.user_id, TeacherLearningExperience, data)
    return success(record, "Thêm quá trình học tập thành công")


@router.put(
    "/learning-experiences/{record_id}",
    response_model=ApiResponse[experience_schema.LearningExperienceRead],
    summary="Cập nhật quá trình học tập",
)
def update_learning_experience(
    record_id: int,
    data: experience_schema.LearningExperienceUpdate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    record = experience_service.update_record(db, current_user.user_id, TeacherLearningExperience, record_id, data)
    return success(record, "Cập nhật quá trình học tập thành công")


@router.delete("/learning-experiences/{record_id}", response_model=MessageResponse, summary="Xóa quá trình học tập")
def delete_learning_experience(
    record_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    experience_service.delete_record(db, current_user.user_id, TeacherLearningExperience, record_id)
    return {"status": "success", "message": "Đã xóa quá trình học tập"}


# ---------------------------------------------------------
# CHỨNG CHỈ
# ---------------------------------------------------------

@router.get(
    "/certificates",
    response_model=ApiResponse[List[experience_schema.CertificateRead]],
    summary="Danh sách chứng chỉ",
)
def list_certificates(
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    records = experience_service.list_records(db, current_user.user_id, TeacherCertificate)
    return success(records, "Lấy danh sách chứng chỉ thành công")


@router.post(
    "/certificates",
    response_model=ApiResponse[experience_schema.CertificateRead],
    status_code=status.HTTP_201_CREATED,
    summary="Thêm chứng chỉ",
)
def create_certificate(
    data: experience_schema.CertificateCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    record = experience_service.create_record(db, current_user.user_id, TeacherCertificate, data)
    return success(record, "Thêm chứng chỉ thành công")


@router.put(
    "/certificates/{record_id}",
    response_model=ApiResponse[experience_schema.CertificateRead],
    summary="Cập nhật chứng chỉ",
)
def update_certificate(
    record_id: int,
    data: experience_schema.CertificateUpdate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    record = experience_service.update_record(db, current_user.user_id, TeacherCertificate, record_id, data)
    return success(record, "Cập nhật chứng chỉ thành công")


@router.delete("/certificates/{record_id}", response_model=MessageResponse, summary="Xóa chứng chỉ")
def delete_certificate(
    record_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    experience_service.delete_record(db, current_user.user_id, TeacherCertificate, record_id)
    return {"status": "success", "message": "Đã xóa chứng chỉ"}


# ---------------------------------------------------------
# CÔNG KHAI
# ---------------------------------------------------------

@router.get(
    "/public/{teacher_id}",
    response_model=ApiResponse[teacher_schema.TeacherPublic],
    summary="Thông tin công khai của giáo viên",
)
def get_public_teacher(teacher_id: int, db: Session = Depends(deps.get_db)):
    """
    Quyền truy cập: **công khai**
    """
    teacher = teacher_service.get_public_teacher(db, teacher_id)
    return success(teacher_schema.TeacherPublic.model_validate(teacher), "Lấy thông tin giáo viên thành công")


@router.get(
    "/public/{teacher_id}/courses",
    response_model=ApiResponse[course_schema.CourseListResult],
    summary="Các khóa học đã xuất bản của giáo viên",
)
def get_public_teacher_courses(
    teacher_id: int,
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
):
    result = teacher_service.get_public_teacher_courses(db, teacher_id, pagination.page, pagination.per_page)
    return success(result, "Lấy danh sách khóa học thành công")


@router.get(
    "/public/{teacher_id}/schedule",
    response_model=ApiResponse[List[schedule_schema.PublicSlot]],
    summary="Khung giờ rảnh của giáo viên",
)
def get_public_teacher_schedule(teacher_id: int, db: Session = Depends(deps.get_db)):
    slots = schedule_service.get_public_slots(db, teacher_id)
    return success([schedule_schema.PublicSlot.model_validate(slot) for slot in slots], "Lấy khung giờ thành công")
