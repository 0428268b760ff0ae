# app/api/v1/api.py
from fastapi import APIRouter

# --- Người dùng & giáo viên ---
from app.api.v1.endpoints.auth_route import router as auth_router
from app.api.v1.endpoints.catalog_route import router as catalog_router
from app.api.v1.endpoints.teacher_route import router as teacher_router
from app.api.v1.endpoints.course_route import router as course_router
# --- Mua khóa học ---
from app.api.v1.endpoints.cart_route import router as cart_router
from app.api.v1.endpoints.order_route import router as order_router
from app.api.v1.endpoints.payment_route import router as payment_router
from app.api.v1.endpoints.purchase_route import router as purchase_router
from app.api.v1.endpoints.favorite_route import router as favorite_router
# --- Học tập ---
from app.api.v1.endpoints.reservation_route import router as reservation_router
from app.api.v1.endpoints.review_route import router as review_router
from app.api.v1.endpoints.notification_route import router as notification_router
# --- Quản trị ---
from app.api.v1.endpoints.admin_route import router as admin_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(catalog_router, tags=["Catalog"])
api_router.include_router(teacher_router, prefix="/teachers", tags=["Teachers"])
api_router.include_router(course_router, prefix="/courses", tags=["Courses"])
api_router.include_router(cart_router, prefix="/cart", tags=["Cart"])
api_router.include_router(order_router, prefix="/orders", tags=["Orders"])
api_router.include_router(payment_router, prefix="/payments", tags=["Payments"])
api_router.include_router(purchase_router, prefix="/purchases", tags=["Purchases"])
api_router.include_router(favorite_router, prefix="/favorites", tags=["Favorites"])
api_router.include_router(reservation_router, prefix="/reservations", tags=["Reservations"])
api_router.include_router(review_router, prefix="/reviews", tags=["Reviews"])
api_router.include_router(notification_router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(admin_router, prefix="/admin", tags=["Admin"])
