import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.constants import ExamSessionStatusEnum, PracticeModeEnum
from app.models.progress import ProgressRecord
from app.schemas.progress import ProgressSubmit
from app.session.client import QuizApiClient, QuizApiError


def test_exam_full_flow(client: TestClient, admin_token: str, user_factory, task_factory, auth_headers, db_session: Session):
    """
    Admin builds an exam, a student takes it through the API client, self-grades
    the open task and the result lands in the history, the ledger and the leaderboard.
    """
    print("\n[TEST] Exam full flow")

    print("[1] Creating tasks and exam")
    closed_a = task_factory(correct_answer="B")
    closed_b = task_factory(correct_answer="C")
    open_task = task_factory(kind="open", correct_answer="12", options=None, points=3)
    r_exam = client.post(
        "/exams/",
        headers=auth_headers(admin_token),
        json={"name": "Exam Flow", "task_ids": [closed_a.id, closed_b.id, open_task.id]}
    )
    assert r_exam.status_code == 201, f"Exam creation failed: {r_exam.text}"
    exam_id = r_exam.json()["data"]["id"]
    print(f"[OK] Exam created: {exam_id}")

    print("[2] Student signs in through the client")
    user_factory("student")
    api = QuizApiClient(client)
    api.login("student", "testpass123")
    assert [e.name for e in api.list_exams()] == ["Exam Flow"]

    print("[3] Taking the exam")
    session = api.start_exam(exam_id, duration_minutes=30, theme=PracticeModeEnum.GAMES)
    assert session.status == ExamSessionStatusEnum.IN_PROGRESS
    assert session.current_task.id == closed_a.id

    session.navigate(1, visible_answer=" b ")
    session.navigate(1, visible_answer="A")
    session.navigate(1, visible_answer="11")
    assert session.status == ExamSessionStatusEnum.GRADING
    assert session.current_grading_task.id == open_task.id

    print("[4] Self-grading the open task")
    session.grade("2")
    assert session.status == ExamSessionStatusEnum.COMPLETED
    assert session.result.earned_points == 3
    assert session.result.total_points == 5
    assert session.result.percent == 60.0
    print(f"[OK] Exam completed with {session.result.percent}%")

    print("[5] Checking history, ledger and leaderboard")
    results = api._request("GET", "/results/")
    assert len(results) == 1
    assert results[0]["exam_id"] == exam_id
    assert results[0]["mode"] == "games"

    records = {r.task_id: r for r in db_session.query(ProgressRecord).all()}
    assert records[closed_a.id].is_correct is True
    assert records[closed_b.id].is_correct is False
    assert records[open_task.id].earned_points == 2

    board = api._request("GET", "/stats/leaderboard")
    # 1 + 0 + 2 games points plus floor(60 / 10) * 5 exam bonus
    assert board["items"][0]["points"] == 33

    assert api.get_random_task(mode=PracticeModeEnum.GAMES) is None
    assert api.get_random_task().id in {closed_a.id, closed_b.id, open_task.id}
    print("[OK] Exam flow complete")


def test_client_surfaces_expired_login(client: TestClient):
    api = QuizApiClient(client, token="expired-or-forged")
    with pytest.raises(QuizApiError) as excinfo:
        api.list_exams()
    assert excinfo.value.requires_login
    assert excinfo.value.code == "UNAUTHORIZED"


def test_client_reset_progress(client: TestClient, user_factory, task_factory):
    task = task_factory()
    user_factory("resetter")
    api = QuizApiClient(client)
    api.login("resetter", "testpass123")

    record = api.submit_progress(ProgressSubmit(task_id=task.id, is_correct=True))
    assert record.earned_points == 1
    assert api.get_random_task() is None

    reset = api.reset_progress(PracticeModeEnum.STANDARD)
    assert reset.deleted == 1
    assert api.get_random_task().id == task.id
