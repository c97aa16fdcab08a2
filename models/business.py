from sqlalchemy import (
    Column, Integer, String, Float, Boolean, Text, ForeignKey, TIMESTAMP, JSON,
    CheckConstraint, func,
)
from db.init import Base

class Business(Base):
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False)
    address = Column(String(250))
    phone = Column(String(30), nullable=True)
    website = Column(String(250), nullable=True)
    email = Column(String(150), nullable=True)
    rating = Column(Float, nullable=True)  # NULL = unrated
    review_count = Column(Integer, nullable=False, default=0)
    tier = Column(String(20), nullable=False, default="free")  # free / verified / featured
    is_active = Column(Boolean, nullable=False, default=True)
    description = Column(Text, nullable=True)
    sizes_available = Column(JSON, nullable=False, default=list)  # e.g. ["10 yard", "20 yard"]
    service_area_miles = Column(Integer, nullable=False, default=25)
    created_at = Column(TIMESTAMP, server_default=func.now())

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 5)", name="business_rating_range"),
        CheckConstraint("review_count >= 0", name="business_review_count_non_negative"),
        CheckConstraint("service_area_miles >= 0", name="business_service_area_non_negative"),
        CheckConstraint("tier IN ('free', 'verified', 'featured')", name="business_tier_values"),
    )
