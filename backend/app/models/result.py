"""
Result model - one graded attempt of a user at an assessment.

Results form an append-only attempt log: nothing prevents several Results
for the same (user, assessment) pair. Each Result owns the StudentAnswer
rows recorded at submission time. StudentAnswer deliberately has no
correctness column; reports join back to Option.is_correct on every read.
"""

import uuid
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship
from app.database import Base


class Result(Base):
    """
    SQLAlchemy model for the results table.

    `version` is a SQLAlchemy version counter: an UPDATE that matches no
    row (deleted or changed concurrently) raises StaleDataError at flush.
    """
    __tablename__ = "results"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
                doc="Unique result identifier")
    assessment_id = Column(String(36), ForeignKey("assessments.id", ondelete="CASCADE"),
                           nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    score = Column(Integer, nullable=False, default=0,
                   doc="Count of correctly answered questions (not a percentage)")
    attempt_date = Column(DateTime, nullable=False,
                          doc="UTC time of submission")
    version = Column(Integer, nullable=False, default=1)

    assessment = relationship("Assessment", back_populates="results")
    user = relationship("User", back_populates="results")
    student_answers = relationship("StudentAnswer", back_populates="result",
                                   cascade="all, delete-orphan",
                                   order_by="StudentAnswer.position")

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_results_assessment_id", "assessment_id"),
        Index("ix_results_user_id", "user_id"),
        Index("ix_results_attempt_date", "attempt_date"),
    )

    def __repr__(self):
        return f"<Result(id={self.id}, user={self.user_id}, assessment={self.assessment_id}, score={self.score})>"


class StudentAnswer(Base):
    """SQLAlchemy model for the student_answers table."""
    __tablename__ = "student_answers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    result_id = Column(String(36), ForeignKey("results.id", ondelete="CASCADE"),
                       nullable=False)
    question_id = Column(String(36), nullable=False)
    selected_option_id = Column(String(36), nullable=False)
    position = Column(Integer, nullable=False, default=0,
                      doc="Order of the answer within the submission")

    result = relationship("Result", back_populates="student_answers")

    __table_args__ = (
        Index("ix_student_answers_result_id", "result_id"),
    )

    def __repr__(self):
        return f"<StudentAnswer(result={self.result_id}, question={self.question_id}, option={self.selected_option_id})>"
