"""
Scoring Service - grades a submitted answer set against the assessment catalog.

Grading policy:
1. Each submitted (question_id, selected_option_id) pair is resolved on its own.
   A question that is not part of the assessment, or an option that is not one
   of that question's options, is dropped silently. The submission still succeeds.
2. When several resolved answers target the same question, the last one wins
   (the question keeps the position of its first answer).
3. score = number of kept answers whose option is marked correct.

The Result and its StudentAnswer rows are written in a single commit.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, NamedTuple, Optional, Tuple
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from app.errors import ConflictError, NotFoundError
from app.models.assessment import Assessment
from app.models.result import Result, StudentAnswer
from app.services.catalog import load_assessment, user_exists
from app.logging_config import get_logger, log_with_context

logger = get_logger("scoring")


class ResolvedAnswer(NamedTuple):
    question_id: str
    selected_option_id: str
    is_correct: bool


def resolve_answer(assessment: Assessment, question_id, selected_option_id) -> Optional[ResolvedAnswer]:
    """
    Resolve one submitted answer against the assessment.

    Returns None when the question is not in the assessment or the option
    does not belong to that question.
    """
    question = assessment.find_question(str(question_id))
    if question is None:
        return None
    option = question.find_option(str(selected_option_id))
    if option is None:
        return None
    return ResolvedAnswer(question.id, option.id, bool(option.is_correct))


def resolve_answers(assessment: Assessment,
                    answers: Iterable[Tuple[str, str]]) -> List[ResolvedAnswer]:
    """Resolve answers in input order, dropping unresolvable ones; last answer per question wins."""
    by_question = {}
    for question_id, selected_option_id in answers:
        resolved = resolve_answer(assessment, question_id, selected_option_id)
        if resolved is not None:
            by_question[resolved.question_id] = resolved
    return list(by_question.values())


def compute_score(resolved: Iterable[ResolvedAnswer]) -> int:
    return sum(1 for answer in resolved if answer.is_correct)


def submit_assessment(db: Session, assessment_id: str, user_id: str,
                      answers: Iterable[Tuple[str, str]]) -> Result:
    """
    Grade and persist one attempt.

    Args:
        db: Request-scoped session
        assessment_id: Assessment being attempted
        user_id: User submitting
        answers: (question_id, selected_option_id) pairs in submission order

    Returns:
        The persisted Result with its StudentAnswers

    Raises:
        NotFoundError: assessment or user does not exist
    """
    start_time = time.time()
    answers = [(str(q), str(o)) for q, o in answers]

    assessment = load_assessment(db, assessment_id)
    if not user_exists(db, user_id):
        raise NotFoundError("User not found")

    resolved = resolve_answers(assessment, answers)
    score = compute_score(resolved)

    result = Result(
        id=str(uuid.uuid4()),
        assessment_id=assessment.id,
        user_id=str(user_id),
        score=score,
        # Naive UTC, matching what SQLite hands back
        attempt_date=datetime.now(timezone.utc).replace(tzinfo=None)
    )
    for position, answer in enumerate(resolved):
        result.student_answers.append(StudentAnswer(
            id=str(uuid.uuid4()),
            question_id=answer.question_id,
            selected_option_id=answer.selected_option_id,
            position=position
        ))

    db.add(result)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(result)

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Submission graded: score {}/{} ({} submitted, {} recorded, {} dropped)".format(
            score, len(assessment.questions), len(answers), len(resolved),
            len(answers) - len(resolved)),
        context={
            "result_id": result.id,
            "user_id": result.user_id,
            "assessment_id": result.assessment_id
        },
        extra_data={
            "duration_ms": round(duration_ms, 2),
            "score": score,
            "question_count": len(assessment.questions)
        })

    return result


def get_result(db: Session, result_id: str) -> Result:
    result = db.query(Result).options(
        selectinload(Result.student_answers)
    ).filter(Result.id == str(result_id)).first()
    if result is None:
        raise NotFoundError("Result not found")
    return result


def list_results(db: Session) -> List[Result]:
    return db.query(Result).options(
        selectinload(Result.student_answers)
    ).order_by(Result.attempt_date.desc()).all()


def replace_result(db: Session, result_id: str, user_id: str, assessment_id: str,
                   score: int, attempt_date: datetime) -> Result:
    """
    Correction path: overwrite score, user, assessment and attempt date.

    StudentAnswers are left untouched and nothing is re-graded. A row that
    was deleted while the update was in flight is reported as NotFound and
    never re-created; a row changed concurrently is reported as Conflict.
    """
    result = db.get(Result, str(result_id))
    if result is None:
        raise NotFoundError("Result not found")
    if not user_exists(db, user_id):
        raise NotFoundError("User not found")
    if db.get(Assessment, str(assessment_id)) is None:
        raise NotFoundError("Assessment not found")

    if attempt_date.tzinfo is not None:
        attempt_date = attempt_date.astimezone(timezone.utc).replace(tzinfo=None)

    result.score = int(score)
    result.user_id = str(user_id)
    result.assessment_id = str(assessment_id)
    result.attempt_date = attempt_date

    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        still_there = db.query(Result.id).filter(Result.id == str(result_id)).first()
        log_with_context(logger, "WARNING",
            "Concurrent change detected while replacing result",
            context={"result_id": str(result_id)},
            extra_data={"deleted": still_there is None})
        if still_there is None:
            raise NotFoundError("Result not found")
        raise ConflictError("Result was modified concurrently; reload and resubmit")

    log_with_context(logger, "INFO", "Result replaced",
        context={"result_id": result.id, "user_id": result.user_id,
                 "assessment_id": result.assessment_id},
        extra_data={"score": result.score})
    return result


def delete_result(db: Session, result_id: str):
    result = db.get(Result, str(result_id))
    if result is None:
        raise NotFoundError("Result not found")
    db.delete(result)
    db.commit()
    log_with_context(logger, "INFO", "Result deleted", context={"result_id": str(result_id)})
