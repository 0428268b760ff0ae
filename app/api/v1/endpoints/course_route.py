# app/api/v1/endpoints/course_route.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth.auth import has_roles
from app.models.course_model import CourseStatus
from app.schemas import course_schema, price_option_schema
from app.schemas.auth_schema import AuthenticatedUser
from app.schemas.common_schema import ApiResponse, MessageResponse, success
from app.services import course_service, price_option_service

router = APIRouter()

TEACHER_ONLY = has_roles(["teacher"])


# ---------------------------------------------------------
# CÔNG KHAI (đăng ký trước các route /{course_id})
# ---------------------------------------------------------

@router.get(
    "/public",
    response_model=ApiResponse[course_schema.PublicCourseListResult],
    summary="Tìm kiếm khóa học đã xuất bản",
)
def list_public_courses(
    keyword: Optional[str] = Query(None, max_length=100),
    main_category_id: Optional[int] = Query(None, gt=0),
    sub_category_id: Optional[int] = Query(None, gt=0),
    city_id: Optional[int] = Query(None, gt=0),
    sort: course_schema.CourseSort = Query(course_schema.CourseSort.newest),
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
):
    """
    Quyền truy cập: **công khai**

    - **sort**: newest | popular | rating | price_low | price_high
    """
    result = course_service.list_public_courses(
        db, keyword, main_category_id, sub_category_id, city_id, sort.value,
        pagination.page, pagination.per_page,
    )
    return success(result, "Lấy danh sách khóa học thành công")


@router.get(
    "/public/{course_id}",
    response_model=ApiResponse[course_schema.PublicCourseDetail],
    summary="Chi tiết khóa học công khai",
)
def get_public_course(course_id: int, db: Session = Depends(deps.get_db)):
    result = course_service.get_public_course(db, course_id)
    return success(result, "Lấy chi tiết khóa học thành công")


# ---------------------------------------------------------
# KHÓA HỌC CỦA GIÁO VIÊN
# ---------------------------------------------------------

@router.post(
    "",
    response_model=ApiResponse[course_schema.CourseRead],
    status_code=status.HTTP_201_CREATED,
    summary="Tạo khóa học mới",
)
def create_course(
    data: course_schema.CourseCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    """
    Quyền truy cập: **teacher** đã được duyệt. Khóa học mới luôn ở trạng thái nháp.
    """
    course = course_service.create_course(db, current_user.user_id, data)
    return success(course_schema.CourseRead.model_validate(course), "Tạo khóa học thành công")


@router.get(
    "",
    response_model=ApiResponse[course_schema.CourseListResult],
    summary="Danh sách khóa học của tôi",
)
def list_my_courses(
    course_status: Optional[CourseStatus] = Query(None, alias="status"),
    pagination: deps.Pagination = Depends(deps.pagination_params),
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    result = course_service.list_my_courses(
        db, current_user.user_id, course_status, pagination.page, pagination.per_page
    )
    return success(result, "Lấy danh sách khóa học thành công")


@router.get("/{course_id}", response_model=ApiResponse[course_schema.CourseRead], summary="Chi tiết khóa học của tôi")
def get_my_course(
    course_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    course = course_service.get_my_course(db, current_user.user_id, course_id)
    return success(course_schema.CourseRead.model_validate(course), "Lấy khóa học thành công")


@router.put("/{course_id}", response_model=ApiResponse[course_schema.CourseRead], summary="Cập nhật khóa học")
def update_course(
    course_id: int,
    data: course_schema.CourseUpdate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    course = course_service.update_course(db, current_user.user_id, course_id, data)
    return success(course_schema.CourseRead.model_validate(course), "Cập nhật khóa học thành công")


@router.delete("/{course_id}", response_model=MessageResponse, summary="Xóa khóa học")
def delete_course(
    course_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    course_service.delete_course(db, current_user.user_id, course_id)
    return {"status": "success", "message": "Xóa khóa học thành công"}


# ---------------------------------------------------------
# VÒNG ĐỜI KHÓA HỌC
# ---------------------------------------------------------

@router.post("/{course_id}/submit", response_model=ApiResponse[course_schema.CourseRead], summary="Gửi duyệt khóa học")
def submit_course(
    course_id: int,
    data: Optional[course_schema.CourseSubmit] = None,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    course = course_service.submit_course(db, current_user.user_id, course_id, data or course_schema.CourseSubmit())
    return success(course_schema.CourseRead.model_validate(course), "Đã gửi khóa học để duyệt")


@router.post(
    "/{course_id}/resubmit",
    response_model=ApiResponse[course_schema.CourseRead],
    summary="Gửi lại khóa học bị từ chối",
)
def resubmit_course(
    course_id: int,
    data: Optional[course_schema.CourseSubmit] = None,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    course = course_service.resubmit_course(db, current_user.user_id, course_id, data or course_schema.CourseSubmit())
    return success(course_schema.CourseRead.model_validate(course), "Đã gửi lại khóa học để duyệt")


@router.post("/{course_id}/publish", response_model=ApiResponse[course_schema.CourseRead], summary="Xuất bản khóa học")
def publish_course(
    course_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    course = course_service.publish_course(db, current_user.user_id, course_id)
    return success(course_schema.CourseRead.model_validate(course), "Xuất bản khóa học thành công")


@router.post("/{course_id}/archive", response_model=ApiResponse[course_schema.CourseRead], summary="Lưu trữ khóa học")
def archive_course(
    course_id: int,
    data: Optional[course_schema.CourseArchive] = None,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    course = course_service.archive_course(db, current_user.user_id, course_id, data or course_schema.CourseArchive())
    return success(course_schema.CourseRead.model_validate(course), "Lưu trữ khóa học thành công")


# ---------------------------------------------------------
# PHƯƠNG ÁN GIÁ
# ---------------------------------------------------------

@router.get(
    "/{course_id}/price-options",
    response_model=ApiResponse[List[price_option_schema.PriceOptionRead]],
    summary="Danh sách phương án giá",
)
def list_price_options(
    course_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    options = price_option_service.list_options(db, current_user.user_id, course_id)
    return success(options, "Lấy phương án giá thành công")


@router.post(
    "/{course_id}/price-options",
    response_model=ApiResponse[price_option_schema.PriceOptionRead],
    status_code=status.HTTP_201_CREATED,
    summary="Thêm phương án giá",
)
def create_price_option(
    course_id: int,
    data: price_option_schema.PriceOptionCreate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    option = price_option_service.create_option(db, current_user.user_id, course_id, data)
    return success(price_option_schema.PriceOptionRead.model_validate(option), "Thêm phương án giá thành công")


@router.put(
    "/{course_id}/price-options/{option_id}",
    response_model=ApiResponse[price_option_schema.PriceOptionRead],
    summary="Cập nhật phương án giá",
)
def update_price_option(
    course_id: int,
    option_id: int,
    data: price_option_schema.PriceOptionUpdate,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    option = price_option_service.update_option(db, current_user.user_id, course_id, option_id, data)
    return success(price_option_schema.PriceOptionRead.model_validate(option), "Cập nhật phương án giá thành công")


@router.delete(
    "/{course_id}/price-options/{option_id}",
    response_model=MessageResponse,
    summary="Xóa phương án giá",
)
def delete_price_option(
    course_id: int,
    option_id: int,
    db: Session = Depends(deps.get_db),
    current_user: AuthenticatedUser = Depends(TEACHER_ONLY),
):
    price_option_service.delete_option(db, current_user.user_id, course_id, option_id)
    return {"status": "success", "message": "Xóa phương án giá thành công"}
