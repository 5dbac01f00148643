"""
Assessment catalog models - the authoritative Assessment -> Question -> Option graph.

An Assessment owns its Questions and each Question owns its Options;
deleting an Assessment removes the whole graph. Exactly the options with
is_correct set define grading truth for a question.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Text, Integer, Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship
from app.database import Base


class Assessment(Base):
    """SQLAlchemy model for the assessments table."""
    __tablename__ = "assessments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
                doc="Unique assessment identifier")
    course_id = Column(String(36), nullable=False,
                       doc="Course the assessment belongs to (course records live outside the grading core)")
    title = Column(Text, nullable=False)
    max_score = Column(Integer, nullable=False, default=0,
                       doc="Nominal maximum score, the question count at authoring time")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    questions = relationship("Question", back_populates="assessment",
                             cascade="all, delete-orphan")
    results = relationship("Result", back_populates="assessment",
                           cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_assessments_course_id", "course_id"),
    )

    def find_question(self, question_id: str):
        """Return the question with this id, or None if it is not part of the assessment."""
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def find_option(self, option_id: str):
        """Return an option from any question of the assessment, or None."""
        for question in self.questions:
            option = question.find_option(option_id)
            if option is not None:
                return option
        return None

    def __repr__(self):
        return f"<Assessment(id={self.id}, title='{self.title}', questions={len(self.questions)})>"


class Question(Base):
    """SQLAlchemy model for the questions table."""
    __tablename__ = "questions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    assessment_id = Column(String(36), ForeignKey("assessments.id", ondelete="CASCADE"),
                           nullable=False)
    question_text = Column(Text, nullable=False)

    assessment = relationship("Assessment", back_populates="questions")
    options = relationship("Option", back_populates="question",
                           cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_questions_assessment_id", "assessment_id"),
    )

    def find_option(self, option_id: str):
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def __repr__(self):
        return f"<Question(id={self.id}, assessment={self.assessment_id})>"


class Option(Base):
    """SQLAlchemy model for the options table."""
    __tablename__ = "options"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    question_id = Column(String(36), ForeignKey("questions.id", ondelete="CASCADE"),
                         nullable=False)
    text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)

    question = relationship("Question", back_populates="options")

    __table_args__ = (
        Index("ix_options_question_id", "question_id"),
    )

    def __repr__(self):
        return f"<Option(id={self.id}, question={self.question_id}, correct={self.is_correct})>"
