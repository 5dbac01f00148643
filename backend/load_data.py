"""
Demo Data Loader - seeds users, an "Algebra Basics" assessment and one graded attempt.

Users belong to the external user directory, so they are written straight
into the database pointed to by DATABASE_URL. The assessment and the
submission go through the API like a real client would.

Usage:
    python load_data.py                              # Uses default URL
    python load_data.py http://localhost:8000         # Custom API URL
"""

import sys
import uuid

import httpx

from app.database import SessionLocal, create_tables
from app.models.user import User

INSTRUCTOR_ID = "5b0c7d52-2f55-4c8e-9a43-5d8f1f0f7a01"
STUDENT_ID = "9e3e9a1c-0d1b-4f0a-8f56-2b7d1c4e6b02"
COURSE_ID = "c1a5e0d4-7e61-4c55-a2f5-0a9b8d6c3e03"

ALGEBRA_BASICS = {
    "courseId": COURSE_ID,
    "title": "Algebra Basics",
    "questions": [
        {
            "questionText": "Solve for x: x + 3 = 5",
            "options": [
                {"text": "1", "isCorrect": False},
                {"text": "2", "isCorrect": True},
                {"text": "8", "isCorrect": False},
            ],
        },
        {
            "questionText": "What is 3 * (2 + 4)?",
            "options": [
                {"text": "10", "isCorrect": False},
                {"text": "18", "isCorrect": True},
            ],
        },
        {
            "questionText": "Simplify: 2x + 3x",
            "options": [
                {"text": "5x", "isCorrect": True},
                {"text": "6x", "isCorrect": False},
            ],
        },
    ],
}


def seed_users():
    create_tables()
    db = SessionLocal()
    try:
        for user_id, name, role in [
            (INSTRUCTOR_ID, "Ada Instructor", "Instructor"),
            (STUDENT_ID, "Sam Student", "Student"),
        ]:
            if db.get(User, user_id) is None:
                db.add(User(id=user_id, name=name, role=role))
        db.commit()
    finally:
        db.close()


def main():
    api_url = sys.argv[1].rstrip("/") if len(sys.argv) > 1 else "http://localhost:8000"

    print("Seeding users...")
    seed_users()

    instructor = {"X-User-Id": INSTRUCTOR_ID, "X-User-Role": "Instructor"}
    student = {"X-User-Id": STUDENT_ID, "X-User-Role": "Student"}

    with httpx.Client(base_url=api_url, timeout=30.0) as client:
        resp = client.post("/api/assessments", json=ALGEBRA_BASICS, headers=instructor)
        resp.raise_for_status()
        assessment = resp.json()
        print(f"Created assessment '{assessment['title']}' ({assessment['assessmentId']})")

        # Two correct answers and one answer with an unknown option
        questions = assessment["questions"]
        answers = []
        for question in questions[:2]:
            correct = next(o for o in question["options"] if o["isCorrect"])
            answers.append({"questionId": question["questionId"], "selectedOptionId": correct["optionId"]})
        answers.append({"questionId": questions[2]["questionId"], "selectedOptionId": str(uuid.uuid4())})

        resp = client.post("/api/results/submit", headers=student, json={
            "assessmentId": assessment["assessmentId"],
            "userId": STUDENT_ID,
            "answers": answers,
        })
        resp.raise_for_status()
        result = resp.json()

    print("=" * 60)
    print("SUBMISSION")
    print("=" * 60)
    print(f"  Result:            {result['resultId']}")
    print(f"  Score:             {result['score']}/{len(questions)}")
    print(f"  Answers recorded:  {len(result['studentAnswers'])} of {len(answers)}")
    print("=" * 60)


if __name__ == "__main__":
    main()
