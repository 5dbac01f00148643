"""
Catalog Service - read access to the Assessment -> Question -> Option graph
and the user directory, plus assessment authoring used by instructors and
the seed script.

The scoring engine and the reports only ever read through these helpers.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from app.errors import NotFoundError
from app.models.assessment import Assessment, Question, Option
from app.models.user import User
from app.logging_config import get_logger, log_with_context

logger = get_logger("catalog")


def load_assessment(db: Session, assessment_id: str) -> Assessment:
    """
    Load an assessment together with its questions and their options.

    Raises:
        NotFoundError: no assessment with that id
    """
    assessment = db.query(Assessment).options(
        selectinload(Assessment.questions).selectinload(Question.options)
    ).filter(Assessment.id == str(assessment_id)).first()

    if assessment is None:
        raise NotFoundError("Assessment not found")
    return assessment


def user_exists(db: Session, user_id: str) -> bool:
    return db.query(User.id).filter(User.id == str(user_id)).first() is not None


def load_user(db: Session, user_id: str) -> User:
    user = db.get(User, str(user_id))
    if user is None:
        raise NotFoundError("User not found")
    return user


def create_assessment(db: Session, course_id: str, title: str,
                      questions: List[dict], assessment_id: Optional[str] = None) -> Assessment:
    """
    Author an assessment with its questions and options in one transaction.

    `questions` is a list of {"question_text": str, "options": [{"text": str,
    "is_correct": bool}, ...]}. Whether a question has a correct option is not
    checked here.
    """
    assessment = Assessment(
        id=str(assessment_id or uuid.uuid4()),
        course_id=str(course_id),
        title=title,
        max_score=len(questions),
        created_at=datetime.now(timezone.utc)
    )
    for q in questions:
        question = Question(id=str(q.get("id") or uuid.uuid4()), question_text=q["question_text"])
        for o in q.get("options", []):
            question.options.append(Option(
                id=str(o.get("id") or uuid.uuid4()),
                text=o["text"],
                is_correct=bool(o.get("is_correct", False))
            ))
        assessment.questions.append(question)

    db.add(assessment)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(assessment)

    log_with_context(logger, "INFO",
        "Created assessment '{}' with {} questions".format(title, len(questions)),
        context={"assessment_id": assessment.id, "course_id": assessment.course_id})
    return assessment
