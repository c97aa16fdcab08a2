from sqlalchemy import Column, Integer, String, Float, Text, CheckConstraint, UniqueConstraint
from db.init import Base

class City(Base):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, index=True)
    city_name = Column(String(100), nullable=False)
    state = Column(String(2), nullable=False)  # two-letter abbreviation, e.g. "TX"
    state_slug = Column(String(100), nullable=False, index=True)
    city_slug = Column(String(100), nullable=False)
    population = Column(Integer, nullable=False, default=0)
    latitude = Column(Float, nullable=False, default=0.0)
    longitude = Column(Float, nullable=False, default=0.0)
    county = Column(String(100))
    metro_area = Column(String(150), nullable=True)
    intro = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("state_slug", "city_slug", name="unique_state_city_slug"),
        CheckConstraint("population >= 0", name="city_population_non_negative"),
        CheckConstraint("latitude BETWEEN -90 AND 90", name="city_latitude_range"),
        CheckConstraint("longitude BETWEEN -180 AND 180", name="city_longitude_range"),
    )
