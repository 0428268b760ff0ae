from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.database import Base
from app.services.service_helper import utc_now


class City(Base):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, index=True)
    city_code = Column(String(10), unique=True, nullable=False)
    city_name = Column(String(50), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
