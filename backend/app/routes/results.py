"""
Results API routes - submission, grading and result reports.

Provides endpoints for:
- Submitting an answer set for grading
- Reading, correcting and deleting individual results
- Student and instructor result reports
"""

import uuid
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.auth import Caller, INSTRUCTOR_ROLE, ensure_owner_or_instructor, get_current_caller, require_roles
from app.database import get_db
from app.models.result import Result
from app.services import reporting, scoring
from app.services.reporting import iso_utc
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


# ── Pydantic schemas ─────────────────────────────────────────

class SubmittedAnswer(BaseModel):
    question_id: uuid.UUID = Field(..., alias="questionId")
    selected_option_id: uuid.UUID = Field(..., alias="selectedOptionId")


class SubmissionRequest(BaseModel):
    """Body of POST /api/results/submit."""
    assessment_id: uuid.UUID = Field(..., alias="assessmentId")
    user_id: uuid.UUID = Field(..., alias="userId")
    answers: List[SubmittedAnswer] = Field(default_factory=list)


class ResultReplaceRequest(BaseModel):
    """Body of PUT /api/results/{id}; replaces the graded fields without re-grading."""
    result_id: uuid.UUID = Field(..., alias="resultId")
    user_id: uuid.UUID = Field(..., alias="userId")
    assessment_id: uuid.UUID = Field(..., alias="assessmentId")
    score: int = Field(..., ge=0)
    attempt_date: datetime = Field(..., alias="attemptDate")


def serialize_result(result: Result) -> dict:
    return {
        "resultId": result.id,
        "assessmentId": result.assessment_id,
        "userId": result.user_id,
        "score": result.score,
        "attemptDate": iso_utc(result.attempt_date),
        "studentAnswers": [
            {"questionId": a.question_id, "selectedOptionId": a.selected_option_id}
            for a in result.student_answers
        ],
    }


@router.post("/api/results/submit")
def submit_assessment(request: SubmissionRequest, db: Session = Depends(get_db),
                      caller: Caller = Depends(get_current_caller)):
    """Grade an answer set. Unresolvable answers are dropped, never rejected."""
    result = scoring.submit_assessment(
        db,
        str(request.assessment_id),
        str(request.user_id),
        [(a.question_id, a.selected_option_id) for a in request.answers]
    )
    return {
        "resultId": result.id,
        "score": result.score,
        "attemptDate": iso_utc(result.attempt_date),
        "studentAnswers": [
            {"questionId": a.question_id, "selectedOptionId": a.selected_option_id}
            for a in result.student_answers
        ],
    }


@router.get("/api/results")
def list_results(db: Session = Depends(get_db),
                 caller: Caller = Depends(require_roles(INSTRUCTOR_ROLE))):
    """All results, most recent first."""
    return [serialize_result(r) for r in scoring.list_results(db)]


@router.get("/api/results/{result_id}")
def get_result(result_id: uuid.UUID, db: Session = Depends(get_db),
               caller: Caller = Depends(get_current_caller)):
    result = scoring.get_result(db, str(result_id))
    ensure_owner_or_instructor(caller, result.user_id)
    return serialize_result(result)


@router.put("/api/results/{result_id}", status_code=status.HTTP_204_NO_CONTENT)
def replace_result(result_id: uuid.UUID, request: ResultReplaceRequest,
                   db: Session = Depends(get_db),
                   caller: Caller = Depends(require_roles(INSTRUCTOR_ROLE))):
    """Correct a result's score, user, assessment and date. Recorded answers are kept as they are."""
    if result_id != request.result_id:
        raise HTTPException(status_code=400, detail="Result id in path and body differ")

    scoring.replace_result(
        db,
        str(result_id),
        str(request.user_id),
        str(request.assessment_id),
        request.score,
        request.attempt_date
    )
    log_with_context(logger, "INFO", "Result {} corrected by {}".format(result_id, caller.user_id),
                     context={"result_id": str(result_id)})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/api/results/{result_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_result(result_id: uuid.UUID, db: Session = Depends(get_db),
                  caller: Caller = Depends(require_roles(INSTRUCTOR_ROLE))):
    scoring.delete_result(db, str(result_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/api/results/student/{user_id}/assessment/{assessment_id}")
def get_student_result(user_id: uuid.UUID, assessment_id: uuid.UUID,
                       db: Session = Depends(get_db),
                       caller: Caller = Depends(get_current_caller)):
    """A student's graded answers for one assessment."""
    return reporting.get_student_result(db, caller, str(user_id), str(assessment_id))


@router.get("/api/results/assessment/{assessment_id}/submissions")
def list_submissions(assessment_id: uuid.UUID, db: Session = Depends(get_db),
                     caller: Caller = Depends(require_roles(INSTRUCTOR_ROLE))):
    return reporting.list_submissions(db, str(assessment_id))


@router.get("/api/results/assessment/{assessment_id}/submission/{result_id}")
def get_detailed_submission(assessment_id: uuid.UUID, result_id: uuid.UUID,
                            db: Session = Depends(get_db),
                            caller: Caller = Depends(require_roles(INSTRUCTOR_ROLE))):
    return reporting.get_detailed_submission(db, str(assessment_id), str(result_id))
