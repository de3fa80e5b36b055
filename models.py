from enum import Enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime

from database import Base


class BookingStatus(str, Enum):
    PENDING = "Pending"
    ASSIGNED = "Assigned"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)

    customer_name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    pickup_location = Column(String, nullable=False)
    dropoff_location = Column(String, nullable=False)
    moving_date = Column(String, nullable=False)

    # JSON text of schemas.BookingItems
    items = Column(Text, nullable=False, default="{}")
    price = Column(Numeric(10, 2), nullable=False)

    status = Column(String, nullable=False, default=BookingStatus.PENDING.value, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
