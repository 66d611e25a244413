"""Skincare routine model."""

from sqlalchemy import Column, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from glowmate.database import Base


class RoutineStep(Base):
    """One product in a user's morning or evening routine."""

    __tablename__ = "skincare_routine_steps"
    __table_args__ = (Index("ix_routine_steps_user_slot", "user_id", "time_of_day", "position"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # TimeOfDay value
    time_of_day = Column(String(10), nullable=False)
    # 0-based order within the slot
    position = Column(Integer, nullable=False)

    user = relationship("User", back_populates="routine_steps")
    product = relationship("Product")
