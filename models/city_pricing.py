from sqlalchemy import Column, Integer, Numeric, ForeignKey, CheckConstraint, UniqueConstraint
from db.init import Base

class CityPricing(Base):
    __tablename__ = "city_pricing"

    id = Column(Integer, primary_key=True, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    size_yards = Column(Integer, nullable=False)
    price_low = Column(Numeric(10, 2), nullable=False)
    price_high = Column(Numeric(10, 2), nullable=False)
    rental_days_included = Column(Integer, nullable=False, default=7)

    __table_args__ = (
        UniqueConstraint("city_id", "size_yards", name="unique_city_size"),
        CheckConstraint("size_yards IN (10, 15, 20, 30, 40)", name="pricing_standard_sizes"),
        CheckConstraint("price_low > 0 AND price_low <= price_high", name="pricing_low_le_high"),
    )
