"""HTTP-level tests: wire contract, authorization and error statuses."""

import uuid

from app.models.result import Result
from app.services import scoring
from conftest import correct_option, headers_for, wrong_option


def submit(client, user, assessment_id, answers, caller=None):
    return client.post("/api/results/submit", headers=headers_for(caller or user), json={
        "assessmentId": str(assessment_id),
        "userId": str(user.id),
        "answers": [{"questionId": q, "selectedOptionId": o} for q, o in answers],
    })


def test_health_and_request_id(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
    assert resp.headers["X-Request-ID"]


def test_unhandled_error_is_500_with_request_id(client, instructor, monkeypatch):
    def boom(db):
        raise RuntimeError("database went away")

    monkeypatch.setattr(scoring, "list_results", boom)
    resp = client.get("/api/results", headers=headers_for(instructor))

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
    assert resp.headers["X-Request-ID"]


def test_submit_wire_contract(client, algebra, student):
    q1, q2, q3 = algebra.questions
    resp = submit(client, student, algebra.id, [
        (q1.id, correct_option(q1).id),
        (q2.id, correct_option(q2).id),
        (q3.id, str(uuid.uuid4())),
    ])

    assert resp.status_code == 200
    body = resp.json()
    assert set(body) == {"resultId", "score", "attemptDate", "studentAnswers"}
    assert body["score"] == 2
    assert body["attemptDate"].endswith("Z")
    assert body["studentAnswers"] == [
        {"questionId": q1.id, "selectedOptionId": correct_option(q1).id},
        {"questionId": q2.id, "selectedOptionId": correct_option(q2).id},
    ]


def test_submit_unknown_assessment_is_404(client, db, student):
    resp = submit(client, student, uuid.uuid4(), [])
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Assessment not found"
    assert db.query(Result).count() == 0


def test_submit_unknown_user_is_404(client, algebra, student):
    ghost_id = str(uuid.uuid4())
    resp = client.post("/api/results/submit", headers=headers_for(student), json={
        "assessmentId": algebra.id, "userId": ghost_id, "answers": [],
    })
    assert resp.status_code == 404
    assert resp.json()["detail"] == "User not found"


def test_submit_requires_caller_identity(client, algebra, student):
    resp = client.post("/api/results/submit", json={
        "assessmentId": algebra.id, "userId": student.id, "answers": [],
    })
    assert resp.status_code == 401


def test_submit_rejects_malformed_ids(client, algebra, student):
    resp = client.post("/api/results/submit", headers=headers_for(student), json={
        "assessmentId": "not-a-uuid", "userId": student.id, "answers": [],
    })
    assert resp.status_code == 422


def test_same_payload_twice_gives_two_results(client, algebra, student):
    q1 = algebra.questions[0]
    first = submit(client, student, algebra.id, [(q1.id, correct_option(q1).id)]).json()
    second = submit(client, student, algebra.id, [(q1.id, correct_option(q1).id)]).json()
    assert first["resultId"] != second["resultId"]
    assert first["score"] == second["score"] == 1


def test_answers_keep_submission_order(client, algebra, student):
    answers = [(q.id, correct_option(q).id) for q in reversed(algebra.questions)]
    body = submit(client, student, algebra.id, answers).json()

    expected = [{"questionId": q, "selectedOptionId": o} for q, o in answers]
    assert body["studentAnswers"] == expected

    stored = client.get(f"/api/results/{body['resultId']}", headers=headers_for(student)).json()
    assert stored["studentAnswers"] == expected


def test_get_result_owner_and_instructor(client, algebra, student, other_student, instructor):
    result_id = submit(client, student, algebra.id, []).json()["resultId"]

    assert client.get(f"/api/results/{result_id}", headers=headers_for(student)).status_code == 200
    assert client.get(f"/api/results/{result_id}", headers=headers_for(instructor)).status_code == 200
    assert client.get(f"/api/results/{result_id}", headers=headers_for(other_student)).status_code == 403
    assert client.get(f"/api/results/{uuid.uuid4()}", headers=headers_for(student)).status_code == 404


def test_list_results_is_instructor_only(client, algebra, student, instructor):
    submit(client, student, algebra.id, [])
    assert client.get("/api/results", headers=headers_for(student)).status_code == 403
    resp = client.get("/api/results", headers=headers_for(instructor))
    assert resp.status_code == 200
    assert len(resp.json()) == 1


def test_put_replaces_score_without_regrading(client, algebra, student, instructor):
    q1 = algebra.questions[0]
    created = submit(client, student, algebra.id, [(q1.id, wrong_option(q1).id)]).json()
    result_id = created["resultId"]

    resp = client.put(f"/api/results/{result_id}", headers=headers_for(instructor), json={
        "resultId": result_id,
        "userId": student.id,
        "assessmentId": algebra.id,
        "score": 3,
        "attemptDate": "2026-02-01T08:30:00Z",
    })
    assert resp.status_code == 204

    stored = client.get(f"/api/results/{result_id}", headers=headers_for(student)).json()
    assert stored["score"] == 3
    assert stored["attemptDate"] == "2026-02-01T08:30:00Z"
    assert stored["studentAnswers"] == created["studentAnswers"]


def test_put_with_mismatched_id_is_400(client, algebra, student, instructor):
    result_id = submit(client, student, algebra.id, []).json()["resultId"]
    resp = client.put(f"/api/results/{result_id}", headers=headers_for(instructor), json={
        "resultId": str(uuid.uuid4()),
        "userId": student.id,
        "assessmentId": algebra.id,
        "score": 1,
        "attemptDate": "2026-02-01T08:30:00",
    })
    assert resp.status_code == 400


def test_put_missing_result_is_404(client, algebra, student, instructor):
    missing = str(uuid.uuid4())
    resp = client.put(f"/api/results/{missing}", headers=headers_for(instructor), json={
        "resultId": missing,
        "userId": student.id,
        "assessmentId": algebra.id,
        "score": 1,
        "attemptDate": "2026-02-01T08:30:00",
    })
    assert resp.status_code == 404


def test_delete_result(client, algebra, student, instructor):
    result_id = submit(client, student, algebra.id, []).json()["resultId"]
    assert client.delete(f"/api/results/{result_id}", headers=headers_for(student)).status_code == 403
    assert client.delete(f"/api/results/{result_id}", headers=headers_for(instructor)).status_code == 204
    assert client.get(f"/api/results/{result_id}", headers=headers_for(instructor)).status_code == 404


def test_student_report_endpoint(client, algebra, student, other_student):
    q1 = algebra.questions[0]
    submit(client, student, algebra.id, [(q1.id, correct_option(q1).id)])
    url = f"/api/results/student/{student.id}/assessment/{algebra.id}"

    resp = client.get(url, headers=headers_for(student))
    assert resp.status_code == 200
    body = resp.json()
    assert body["score"] == 1
    assert body["maxScore"] == 3
    assert body["answers"][0]["isCorrect"] is True

    assert client.get(url, headers=headers_for(other_student)).status_code == 403


def test_submissions_endpoint_is_instructor_only(client, algebra, student, instructor):
    q1, q2, q3 = algebra.questions
    submit(client, student, algebra.id, [(q.id, correct_option(q).id) for q in (q1, q2, q3)])
    url = f"/api/results/assessment/{algebra.id}/submissions"

    assert client.get(url, headers=headers_for(student)).status_code == 403
    resp = client.get(url, headers=headers_for(instructor))
    assert resp.status_code == 200
    assert resp.json()[0]["percentage"] == 100.0


def test_detailed_submission_endpoint(client, algebra, student, instructor):
    q1 = algebra.questions[0]
    result_id = submit(client, student, algebra.id, [(q1.id, correct_option(q1).id)]).json()["resultId"]

    resp = client.get(f"/api/results/assessment/{algebra.id}/submission/{result_id}",
                      headers=headers_for(instructor))
    assert resp.status_code == 200
    answer = resp.json()["answers"][0]
    assert answer["isCorrect"] is True
    assert len(answer["allOptions"]) == 2

    missing = client.get(f"/api/results/assessment/{uuid.uuid4()}/submission/{result_id}",
                         headers=headers_for(instructor))
    assert missing.status_code == 404


def test_create_and_read_assessment(client, student, instructor):
    payload = {
        "courseId": str(uuid.uuid4()),
        "title": "Fractions",
        "questions": [{
            "questionText": "1/2 + 1/4",
            "options": [{"text": "3/4", "isCorrect": True}, {"text": "2/6"}],
        }],
    }
    assert client.post("/api/assessments", json=payload, headers=headers_for(student)).status_code == 403

    created = client.post("/api/assessments", json=payload, headers=headers_for(instructor))
    assert created.status_code == 201
    assessment_id = created.json()["assessmentId"]
    assert created.json()["maxScore"] == 1

    paper = client.get(f"/api/assessments/{assessment_id}", headers=headers_for(student)).json()
    assert all("isCorrect" not in o for o in paper["questions"][0]["options"])

    keyed = client.get(f"/api/assessments/{assessment_id}", headers=headers_for(instructor)).json()
    assert sorted(o["isCorrect"] for o in keyed["questions"][0]["options"]) == [False, True]
