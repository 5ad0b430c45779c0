# ecozync/models.py
from sqlalchemy import Column, String, Integer, Float, Date, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import uuid

def gen_id(prefix):
    return f"{prefix}_{uuid.uuid4().hex[:8]}"

class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=lambda: gen_id("user"))
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    token = Column(String, nullable=True)  # simple session token
    created_at = Column(DateTime, default=datetime.utcnow)

    calculations = relationship("Calculation", back_populates="user", cascade="all, delete-orphan")

class Calculation(Base):
    __tablename__ = "carbon_calculations"
    __table_args__ = (UniqueConstraint("user_id", "calculation_date", name="uq_calculation_user_day"),)

    id = Column(String, primary_key=True, default=lambda: gen_id("calc"))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    calculation_date = Column(Date, nullable=False)
    assessment_data = Column(JSON, default=dict)
    transport_emissions = Column(Integer, default=0)
    energy_emissions = Column(Integer, default=0)
    diet_emissions = Column(Integer, default=0)
    lifestyle_emissions = Column(Integer, default=0)
    travel_emissions = Column(Integer, default=0)  # aviation
    other_emissions = Column(Integer, default=0)  # waste
    total_emissions = Column(Integer, default=0)
    calculation_method = Column(String, nullable=True)  # local_enhanced | local_legacy
    calculation_confidence = Column(Float, default=0.0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="calculations")
