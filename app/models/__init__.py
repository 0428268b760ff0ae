from .user_model import User
from .role_model import UserRole
from .token_model import RefreshToken
from .admin_model import AdminUser
from .category_model import MainCategory, SubCategory
from .city_model import City
from .teacher_model import Teacher
from .course_model import Course
from .price_option_model import CoursePriceOption
from .schedule_model import TeacherAvailableSlot
from .experience_model import TeacherLearningExperience, TeacherWorkExperience
from .certificate_model import TeacherCertificate
from .cart_model import UserCartItem
from .order_model import Order, OrderItem
from .purchase_model import UserCoursePurchase
from .reservation_model import Reservation
from .review_model import Review
from .favorite_model import UserFavorite
from .notification_model import Notification
