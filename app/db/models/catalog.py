from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, Numeric, String, Text

from app.db.base import Base


class Yacht(Base):
    __tablename__ = "yachts"
    __table_args__ = (
        CheckConstraint("size > 0", name="ck_yachts_size_positive"),
        CheckConstraint("capacity > 0", name="ck_yachts_capacity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    size = Column(Integer, nullable=False)  # feet
    capacity = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)


class Service(Base):
    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("price_per_session >= 0", name="ck_services_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price_per_session = Column(Numeric(10, 2), nullable=False)
    duration_minutes = Column(Integer, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("ticket_price >= 0", name="ck_events_ticket_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    capacity = Column(Integer, nullable=False)
    ticket_price = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
