from sqlalchemy import Column, Integer, String, ForeignKey, TIMESTAMP, func
from db.init import Base

class Lead(Base):
    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False)
    name = Column(String(150), nullable=False)
    email = Column(String(150), nullable=False)
    phone = Column(String(30), nullable=False)
    message = Column(String(2000), nullable=True)
    project_type = Column(String(100), nullable=True)
    dumpster_size_needed = Column(String(20), default="Not Sure")
    project_start = Column(String(50), default="ASAP")
    zip_code = Column(String(10), nullable=True)
    status = Column(String(20), default="new")  # new / contacted / converted / lost
    created_at = Column(TIMESTAMP, server_default=func.now())
