"""
Reporting Service - read-side views over persisted results.

Reports are projections of (Result, StudentAnswers, current catalog).
Correctness is looked up from Option.is_correct on every read and the
maximum score is the assessment's current question count, so a report
follows later edits to the catalog rather than a snapshot taken at
submission time.
"""

import time
from datetime import timezone
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload, selectinload

from app.auth import Caller, ensure_owner_or_instructor
from app.errors import NotFoundError
from app.models.assessment import Assessment, Question
from app.models.result import Result, StudentAnswer
from app.services.catalog import load_assessment, load_user
from app.logging_config import get_logger, log_with_context

logger = get_logger("reporting")


def percentage(score: int, max_score: int) -> float:
    """round(score / max_score * 100, 2); 0 when the assessment has no questions."""
    if not max_score:
        return 0
    return round(score / max_score * 100, 2)


def iso_utc(value) -> Optional[str]:
    """ISO-8601 with an explicit UTC marker; naive datetimes are stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + "Z"


def project_answer(answer: StudentAnswer, assessment: Optional[Assessment],
                   include_options: bool = False) -> dict:
    """
    Enrich one recorded answer with question text, option text and correctness.

    Anything that no longer resolves in the catalog comes back as None,
    and correctness defaults to False.
    """
    question = assessment.find_question(answer.question_id) if assessment else None
    option = assessment.find_option(answer.selected_option_id) if assessment else None

    view = {
        "questionId": answer.question_id,
        "questionText": question.question_text if question else None,
        "selectedOptionId": answer.selected_option_id,
        "selectedOptionText": option.text if option else None,
        "isCorrect": bool(option.is_correct) if option else False,
    }
    if include_options:
        view["allOptions"] = [
            {"optionId": o.id, "text": o.text, "isCorrect": bool(o.is_correct)}
            for o in question.options
        ] if question else None
    return view


def _max_score(assessment: Optional[Assessment]) -> int:
    return len(assessment.questions) if assessment else 0


def _load_result_graph(db: Session):
    return db.query(Result).options(
        selectinload(Result.student_answers),
        joinedload(Result.user),
        joinedload(Result.assessment)
        .selectinload(Assessment.questions)
        .selectinload(Question.options)
    )


def get_student_result(db: Session, caller: Caller, user_id: str, assessment_id: str) -> dict:
    """
    A user's result for an assessment, for the user themself or an instructor.

    With several attempts on record the most recent one is reported.
    """
    ensure_owner_or_instructor(caller, user_id)

    result = _load_result_graph(db).filter(
        Result.user_id == str(user_id),
        Result.assessment_id == str(assessment_id)
    ).order_by(Result.attempt_date.desc()).first()

    if result is None:
        raise NotFoundError("No submission found for this assessment")

    user = load_user(db, user_id)
    assessment = result.assessment
    max_score = _max_score(assessment)

    return {
        "resultId": result.id,
        "userName": user.name,
        "assessmentTitle": assessment.title if assessment else None,
        "score": result.score,
        "maxScore": max_score,
        "percentage": percentage(result.score, max_score),
        "attemptDate": iso_utc(result.attempt_date),
        "answers": [project_answer(a, assessment) for a in result.student_answers],
    }


def list_submissions(db: Session, assessment_id: str) -> List[dict]:
    """Every attempt at an assessment, most recent first."""
    start_time = time.time()
    assessment = load_assessment(db, assessment_id)
    max_score = _max_score(assessment)

    results = db.query(Result).options(
        selectinload(Result.student_answers),
        joinedload(Result.user)
    ).filter(
        Result.assessment_id == assessment.id
    ).order_by(Result.attempt_date.desc()).all()

    submissions = [
        {
            "resultId": r.id,
            "userId": r.user_id,
            "userName": r.user.name if r.user else None,
            "score": r.score,
            "maxScore": max_score,
            "attemptDate": iso_utc(r.attempt_date),
            "answerCount": len(r.student_answers),
            "percentage": percentage(r.score, max_score),
        }
        for r in results
    ]

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Listed {} submissions".format(len(submissions)),
        context={"assessment_id": assessment.id},
        extra_data={"duration_ms": round(duration_ms, 2)})
    return submissions


def get_detailed_submission(db: Session, assessment_id: str, result_id: str) -> dict:
    """Instructor review of one attempt, including every option of each answered question."""
    result = _load_result_graph(db).filter(
        Result.id == str(result_id),
        Result.assessment_id == str(assessment_id)
    ).first()

    if result is None:
        raise NotFoundError("Submission not found")

    assessment = result.assessment
    max_score = _max_score(assessment)

    return {
        "resultId": result.id,
        "userId": result.user_id,
        "userName": result.user.name if result.user else None,
        "assessmentTitle": assessment.title if assessment else None,
        "score": result.score,
        "maxScore": max_score,
        "percentage": percentage(result.score, max_score),
        "attemptDate": iso_utc(result.attempt_date),
        "answers": [project_answer(a, assessment, include_options=True)
                    for a in result.student_answers],
    }
