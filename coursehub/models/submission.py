from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from coursehub.db.base_class import Base


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)

    assignment_id = Column(Integer, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, nullable=False, index=True)

    content = Column(Text, nullable=True)

    # Attachment (all null when the submission is text only)
    file_name = Column(String(255), nullable=True)
    file_url = Column(String(512), nullable=True)
    size_bytes = Column(Integer, nullable=True)
    mime_type = Column(String(255), nullable=True)

    submitted_at = Column(DateTime(timezone=True), nullable=False)

    # SUBMITTED / LATE / GRADED
    status = Column(String(20), nullable=False, default="SUBMITTED", index=True)

    # Frozen at (re)submission time, never recomputed
    is_late = Column(Boolean, nullable=False, default=False)
    days_late = Column(Integer, nullable=False, default=0)

    # Grading fields (nullable until graded)
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )

    assignment = relationship("Assignment", back_populates="submissions")

    @property
    def attachment(self) -> dict | None:
        if self.file_url is None:
            return None
        return {
            "file_name": self.file_name,
            "file_url": self.file_url,
            "size_bytes": self.size_bytes,
            "mime_type": self.mime_type,
        }
