import io
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from coursehub.models.assignment import Assignment
from coursehub.services import attachments
from tests.conftest import (
    CLOSED_HW,
    FOREIGN_HW,
    LATE_OK_HW,
    OPEN_HW,
    OTHER_INSTRUCTOR_ID,
    OTHER_STUDENT_ID,
    instructor_headers,
    student_headers,
)


def submit(client, assignment_id, content=None, files=None, headers=None):
    data = {"assignmentId": str(assignment_id)}
    if content is not None:
        data["content"] = content
    return client.post(
        "/submissions",
        data=data,
        files=files,
        headers=headers or student_headers(),
    )


def test_submit_and_resubmit_updates_same_row(client):
    r1 = submit(client, OPEN_HW, "first")
    assert r1.status_code == 201, r1.text
    body1 = r1.json()
    assert body1["status"] == "SUBMITTED"
    assert body1["grade"] is None
    assert body1["is_late"] is False

    r2 = submit(client, OPEN_HW, "  second  ")
    assert r2.status_code == 201, r2.text
    body2 = r2.json()
    assert body2["id"] == body1["id"]
    assert body2["content"] == "second"


def test_empty_submission_is_rejected(client):
    r = submit(client, OPEN_HW, "   ")
    assert r.status_code == 400
    assert r.json() == {"error": "Please provide either written content or upload a file"}


def test_submit_with_file(client):
    r = submit(
        client,
        OPEN_HW,
        files={"file": ("my essay.pdf", b"%PDF-1.4 fake", "application/pdf")},
    )
    assert r.status_code == 201, r.text
    attachment = r.json()["attachment"]
    assert attachment["file_name"] == "my essay.pdf"
    assert attachment["mime_type"] == "application/pdf"
    assert attachment["size_bytes"] == len(b"%PDF-1.4 fake")
    assert attachment["file_url"].endswith("_my_essay.pdf")


def test_unsupported_file_type_is_rejected(client):
    r = submit(
        client,
        OPEN_HW,
        "text too",
        files={"file": ("run.exe", b"MZ", "application/x-msdownload")},
    )
    assert r.status_code == 400
    assert "Unsupported file type" in r.json()["error"]


def test_oversized_file_is_rejected(client, monkeypatch):
    monkeypatch.setattr(attachments, "MAX_UPLOAD_BYTES", 4)
    r = submit(
        client,
        OPEN_HW,
        files={"file": ("notes.txt", b"12345", "text/plain")},
    )
    assert r.status_code == 400
    assert r.json()["error"].startswith("File size")


def test_only_students_submit(client):
    r = submit(client, OPEN_HW, "hi", headers=instructor_headers())
    assert r.status_code == 403
    assert "error" in r.json()


def test_missing_identity_is_unauthorized(client):
    r = client.post("/submissions", data={"assignmentId": str(OPEN_HW), "content": "x"})
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_missing_assignment_id_is_reported_as_error(client):
    r = client.post("/submissions", data={"content": "x"}, headers=student_headers())
    assert r.status_code == 422
    assert "assignmentId" in r.json()["error"]


def test_submit_unknown_assignment(client):
    r = submit(client, 999, "x")
    assert r.status_code == 404
    assert r.json() == {"error": "Assignment not found"}


def test_late_submission_is_marked_late(client):
    r = submit(client, LATE_OK_HW, "late")
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["status"] == "LATE"
    assert body["is_late"] is True
    assert body["days_late"] == 2


def test_resubmission_after_deadline_is_closed(client):
    from tests.conftest import TestingSessionLocal  # reuse test session factory

    r1 = submit(client, OPEN_HW, "My essay")
    assert r1.status_code == 201

    # force the assignment's due date into the past
    db: Session = TestingSessionLocal()
    try:
        a = db.query(Assignment).filter(Assignment.id == OPEN_HW).first()
        a.due_at = datetime.now(timezone.utc) - timedelta(seconds=1)
        db.commit()
    finally:
        db.close()

    r2 = submit(client, OPEN_HW, "changed my mind")
    assert r2.status_code == 409
    assert "late submissions are not allowed" in r2.json()["error"]

    r3 = client.get(f"/submissions/{r1.json()['id']}", headers=student_headers())
    assert r3.status_code == 200
    assert r3.json()["content"] == "My essay"


def test_first_submission_to_closed_assignment_is_accepted_as_late(client):
    r = submit(client, CLOSED_HW, "better late than never")
    assert r.status_code == 201
    assert r.json()["status"] == "LATE"


def test_students_only_see_their_own_submissions(client):
    mine = submit(client, OPEN_HW, "mine").json()
    theirs = submit(client, OPEN_HW, "theirs", headers=student_headers(OTHER_STUDENT_ID)).json()

    r = client.get("/submissions", headers=student_headers())
    assert r.status_code == 200
    assert [s["id"] for s in r.json()] == [mine["id"]]

    r = client.get(f"/submissions/{theirs['id']}", headers=student_headers())
    assert r.status_code == 404


def test_instructors_see_submissions_for_their_assignments(client):
    submit(client, OPEN_HW, "one")
    submit(client, FOREIGN_HW, "two")

    r = client.get("/submissions", headers=instructor_headers())
    assert [s["assignment_id"] for s in r.json()] == [OPEN_HW]

    r = client.get("/submissions", headers=instructor_headers(OTHER_INSTRUCTOR_ID))
    assert [s["assignment_id"] for s in r.json()] == [FOREIGN_HW]


def test_list_filters_and_sorts(client):
    a = submit(client, OPEN_HW, "Essay about Rome").json()
    b = submit(client, OPEN_HW, "rome again", headers=student_headers(OTHER_STUDENT_ID)).json()
    c = submit(client, LATE_OK_HW, "Carthage").json()

    headers = instructor_headers()

    r = client.get("/submissions", params={"assignmentId": OPEN_HW}, headers=headers)
    assert {s["id"] for s in r.json()} == {a["id"], b["id"]}

    r = client.get("/submissions", params={"search": "ROME", "sortBy": "id", "order": "asc"}, headers=headers)
    assert [s["id"] for s in r.json()] == [a["id"], b["id"]]

    r = client.get("/submissions", params={"status": "late"}, headers=headers)
    assert [s["id"] for s in r.json()] == [c["id"]]

    r = client.get("/submissions", params={"sortBy": "id", "order": "desc"}, headers=headers)
    assert [s["id"] for s in r.json()] == [c["id"], b["id"], a["id"]]


def test_submission_stats(client):
    submit(client, OPEN_HW, "one")
    submit(client, LATE_OK_HW, "two")

    r = client.get("/submissions/stats", headers=instructor_headers())
    assert r.status_code == 200
    assert r.json() == {
        "total": 2,
        "submitted": 1,
        "late": 1,
        "graded": 0,
        "average_grade": None,
    }


def test_read_assignment(client):
    r = client.get(f"/assignments/{LATE_OK_HW}", headers=student_headers())
    assert r.status_code == 200
    body = r.json()
    assert body["allow_late_submissions"] is True
    assert body["late_penalty_percent_per_day"] == 10
    assert body["max_points"] == 50

    assert client.get("/assignments/999", headers=student_headers()).status_code == 404


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_pending_status_means_not_yet_graded(client):
    on_time = submit(client, OPEN_HW, "waiting for a grade").json()
    late = submit(client, LATE_OK_HW, "late one").json()
    graded = submit(client, OPEN_HW, "graded one", headers=student_headers(OTHER_STUDENT_ID)).json()
    client.patch(f"/submissions/{graded['id']}/grade", json={"grade": 75}, headers=instructor_headers())

    r = client.get("/submissions", params={"status": "pending"}, headers=instructor_headers())
    assert r.status_code == 200
    assert [s["id"] for s in r.json()] == [on_time["id"]]

    r = client.get("/submissions", params={"status": "late"}, headers=instructor_headers())
    assert [s["id"] for s in r.json()] == [late["id"]]


def test_read_limited_stops_past_the_cap(monkeypatch):
    monkeypatch.setattr(attachments, "MAX_UPLOAD_BYTES", 10)
    stream = io.BytesIO(b"x" * 1000)

    data = attachments.read_limited(stream)
    assert len(data) == 11
    assert stream.tell() == 11

    assert attachments.read_limited(io.BytesIO(b"short")) == b"short"
