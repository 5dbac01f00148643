"""
Assessment API routes - authoring and reading the question paper.
"""

import uuid
from typing import List
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.auth import Caller, INSTRUCTOR_ROLE, get_current_caller, require_roles
from app.database import get_db
from app.models.assessment import Assessment
from app.services import catalog

router = APIRouter()


class OptionIn(BaseModel):
    text: str
    is_correct: bool = Field(False, alias="isCorrect")


class QuestionIn(BaseModel):
    question_text: str = Field(..., alias="questionText")
    options: List[OptionIn] = Field(default_factory=list)


class AssessmentCreateRequest(BaseModel):
    course_id: uuid.UUID = Field(..., alias="courseId")
    title: str = Field(..., min_length=1)
    questions: List[QuestionIn] = Field(default_factory=list)


def serialize_assessment(assessment: Assessment, include_answers: bool) -> dict:
    """Question paper view; correctness flags only when include_answers is set."""
    questions = []
    for q in assessment.questions:
        options = []
        for o in q.options:
            option = {"optionId": o.id, "text": o.text}
            if include_answers:
                option["isCorrect"] = bool(o.is_correct)
            options.append(option)
        questions.append({"questionId": q.id, "questionText": q.question_text, "options": options})

    return {
        "assessmentId": assessment.id,
        "courseId": assessment.course_id,
        "title": assessment.title,
        "maxScore": assessment.max_score,
        "questions": questions,
    }


@router.post("/api/assessments", status_code=status.HTTP_201_CREATED)
def create_assessment(request: AssessmentCreateRequest, db: Session = Depends(get_db),
                      caller: Caller = Depends(require_roles(INSTRUCTOR_ROLE))):
    assessment = catalog.create_assessment(
        db,
        str(request.course_id),
        request.title,
        [
            {
                "question_text": q.question_text,
                "options": [{"text": o.text, "is_correct": o.is_correct} for o in q.options]
            }
            for q in request.questions
        ]
    )
    return serialize_assessment(assessment, include_answers=True)


@router.get("/api/assessments/{assessment_id}")
def get_assessment(assessment_id: uuid.UUID, db: Session = Depends(get_db),
                   caller: Caller = Depends(get_current_caller)):
    assessment = catalog.load_assessment(db, str(assessment_id))
    return serialize_assessment(assessment, include_answers=caller.is_instructor)
