from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import relationship

from coursehub.db.base_class import Base


# Owned by the course collaborator; this service only reads it.
class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    instructor_id = Column(Integer, nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_at = Column(DateTime(timezone=True), nullable=True)

    max_points = Column(Float, nullable=False, default=100)
    allow_late_submissions = Column(Boolean, nullable=False, default=False)
    late_penalty_percent_per_day = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")
