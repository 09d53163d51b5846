"""
SQLAlchemy database models.

Only favorite locations are stored; accounts belong to the credential service
and are referenced here by their integer id.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func
from .db import Base

NAME_MAX_LENGTH = 200


class FavoriteLocation(Base):
    """
    A user's saved location.

    No unique constraint on (user_id, latitude, longitude): duplicates are
    rejected by FavoriteLocationStore.add before insert.
    """
    __tablename__ = "favorite_locations"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    added_at = Column(DateTime(timezone=True), server_default=func.now())
