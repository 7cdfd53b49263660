import asyncio

import pytest

from app.core.constants import ExamSessionStatusEnum, PracticeModeEnum
from app.schemas.exam import ExamDetail
from app.schemas.task import Task
from app.session.errors import EmptyExamError, GradeValidationError, InvalidTransitionError
from app.session.exam_session import ExamSession, answers_match
from app.session.timer import CountdownTimer


def _closed(task_id, answer):
    return Task(id=task_id, kind="closed", prompt_ref=f"/uploads/{task_id}.png", correct_answer=answer, options=["A", "B", "C"], points=1)


def _open(task_id, points, answer="42"):
    return Task(id=task_id, kind="open", prompt_ref=f"/uploads/{task_id}.png", correct_answer=answer, points=points)


def _exam(*tasks, name="Mock"):
    return ExamDetail(id=7, name=name, task_ids=[t.id for t in tasks], task_count=len(tasks), tasks=list(tasks))


@pytest.fixture
def submitted():
    return []


@pytest.fixture
def session(submitted):
    return ExamSession(on_complete=submitted.append)


class TestAnswersMatch:
    def test_case_and_whitespace_insensitive(self):
        assert answers_match("  b ", "B")

    def test_blank_never_matches(self):
        assert not answers_match(None, "B")
        assert not answers_match("", "B")

    def test_mismatch(self):
        assert not answers_match("A", "B")


class TestExamSession:
    def test_scoring_mixed_exam(self, session, submitted):
        session.start(_exam(_closed(1, "A"), _closed(2, "B"), _open(3, points=3)))
        session.answer(1, "A")
        session.answer(2, "C")
        session.finish()
        assert session.status == ExamSessionStatusEnum.GRADING

        session.grade(2)

        assert session.status == ExamSessionStatusEnum.COMPLETED
        result = submitted[0]
        assert result.earned_points == 3
        assert result.total_points == 5
        assert result.percent == 60.0
        assert result.wrong_count == 2
        assert (result.closed_correct, result.closed_wrong) == (1, 1)
        assert (result.open_correct, result.open_wrong) == (0, 1)
        assert [(o.task_id, o.is_correct, o.earned_points) for o in result.outcomes] == [
            (1, True, 1), (2, False, 0), (3, False, 2)
        ]

    def test_closed_tasks_weigh_one_point(self, session, submitted):
        heavy = Task(id=1, kind="closed", prompt_ref="/uploads/1.png", correct_answer="A", options=["A"], points=5)
        session.start(_exam(heavy))
        session.finish("a")
        assert submitted[0].total_points == 1
        assert submitted[0].percent == 100.0

    def test_closed_only_exam_skips_grading(self, session, submitted):
        session.start(_exam(_closed(1, "A")))
        session.finish()
        assert session.status == ExamSessionStatusEnum.COMPLETED
        assert submitted[0].percent == 0.0

    def test_full_marks_on_open_task_counts_as_correct(self, session, submitted):
        session.start(_exam(_open(1, points=4)))
        session.finish()
        session.grade("4")
        assert submitted[0].open_correct == 1
        assert submitted[0].wrong_count == 0

    def test_theme_becomes_result_mode(self, session, submitted):
        session.start(_exam(_closed(1, "A")), theme=PracticeModeEnum.GAMES)
        session.finish()
        assert submitted[0].mode == PracticeModeEnum.GAMES
        assert submitted[0].exam_id == 7
        assert submitted[0].exam_name == "Mock"

    def test_blank_answer_keeps_previous(self, session):
        session.start(_exam(_closed(1, "A"), _closed(2, "B")))
        session.navigate(1, visible_answer="A")
        session.navigate(-1, visible_answer="B")
        session.navigate(1, visible_answer="")
        session.navigate(-1, visible_answer=None)
        assert session.answers == {1: "A", 2: "B"}

    def test_navigation_bounds(self, session):
        session.start(_exam(_closed(1, "A"), _closed(2, "B")))
        session.navigate(-1)
        assert session.current_index == 0
        session.navigate(1)
        assert session.current_task.id == 2
        with pytest.raises(ValueError):
            session.navigate(2)

    def test_navigating_past_last_task_finishes(self, session, submitted):
        session.start(_exam(_closed(1, "A"), _closed(2, "B")))
        session.navigate(1, "A")
        session.navigate(1, "B")
        assert session.status == ExamSessionStatusEnum.COMPLETED
        assert submitted[0].percent == 100.0

    def test_timer_expiry_finishes_once(self, session, submitted):
        session.start(_exam(_closed(1, "A")), duration_minutes=1)
        session.answer(1, "A")
        assert session.remaining_seconds == 60

        session.tick(59)
        assert session.status == ExamSessionStatusEnum.IN_PROGRESS
        session.tick()
        assert session.status == ExamSessionStatusEnum.COMPLETED
        session.tick()
        session.tick(10)
        assert len(submitted) == 1
        assert submitted[0].percent == 100.0

    def test_timer_expiry_moves_to_grading(self, session, submitted):
        session.start(_exam(_closed(1, "A"), _open(2, points=2)), duration_minutes=1)
        session.tick(60)
        assert session.status == ExamSessionStatusEnum.GRADING
        assert submitted == []

    def test_finish_stops_timer(self, session):
        session.start(_exam(_open(1, points=2)), duration_minutes=1)
        session.finish()
        assert not session.timer.active
        session.tick(60)
        assert session.status == ExamSessionStatusEnum.GRADING

    def test_no_timer_without_duration(self, session):
        session.start(_exam(_closed(1, "A")))
        assert session.remaining_seconds is None
        assert session.tick() is None

    @pytest.mark.parametrize("bad", ["abc", "", -1, 4, 1.5, True, None])
    def test_invalid_grade_is_rejected(self, session, submitted, bad):
        session.start(_exam(_open(1, points=3)))
        session.finish()
        with pytest.raises(GradeValidationError):
            session.grade(bad)
        assert session.status == ExamSessionStatusEnum.GRADING
        assert session.current_grading_task.id == 1
        assert submitted == []

    def test_grading_walks_open_tasks_in_order(self, session, submitted):
        session.start(_exam(_open(1, points=2), _closed(2, "A"), _open(3, points=5)))
        session.finish()
        assert session.current_grading_task.id == 1
        session.grade(0)
        assert session.current_grading_task.id == 3
        session.grade(5)
        assert submitted[0].earned_points == 5
        assert submitted[0].total_points == 8

    def test_empty_exam(self, session):
        with pytest.raises(EmptyExamError):
            session.start(_exam())
        assert session.status == ExamSessionStatusEnum.NOT_STARTED

    def test_answer_before_start(self, session):
        with pytest.raises(InvalidTransitionError):
            session.answer(1, "A")

    def test_answer_after_completion(self, session):
        session.start(_exam(_closed(1, "A")))
        session.finish()
        with pytest.raises(InvalidTransitionError):
            session.answer(1, "B")

    def test_abandon_discards_attempt(self, session, submitted):
        session.start(_exam(_closed(1, "A"), _open(2, points=2)), duration_minutes=5)
        session.answer(1, "A")
        session.abandon()
        assert session.status == ExamSessionStatusEnum.ABANDONED
        assert session.answers == {}
        assert session.remaining_seconds is None
        assert submitted == []

    def test_abandon_when_idle_is_noop(self, session):
        session.abandon()
        assert session.status == ExamSessionStatusEnum.NOT_STARTED

    def test_resubmit_after_failed_submission(self):
        calls = []

        def flaky(result):
            calls.append(result)
            if len(calls) == 1:
                raise ConnectionError("offline")

        session = ExamSession(on_complete=flaky)
        session.start(_exam(_closed(1, "A")))
        with pytest.raises(ConnectionError):
            session.finish("A")
        assert session.status == ExamSessionStatusEnum.IN_PROGRESS
        assert session.result.percent == 100.0

        session.resubmit()
        assert session.status == ExamSessionStatusEnum.COMPLETED
        assert len(calls) == 2
        with pytest.raises(InvalidTransitionError):
            session.resubmit()


class TestCountdownTimer:
    def test_fires_once(self):
        fired = []
        timer = CountdownTimer(2, lambda: fired.append(True))
        timer.tick()
        timer.tick()
        timer.tick()
        assert fired == [True]
        assert timer.remaining_seconds == 0

    def test_cancelled_timer_never_fires(self):
        fired = []
        timer = CountdownTimer(1, lambda: fired.append(True))
        timer.cancel()
        timer.tick()
        assert fired == []

    def test_run_counts_down(self):
        fired = []
        timer = CountdownTimer(3, lambda: fired.append(True), interval=0)
        asyncio.run(timer.run())
        assert fired == [True]
        assert not timer.active

    def test_running_countdown_refuses_outside_ticks(self):
        async def scenario():
            timer = CountdownTimer(5, lambda: None, interval=0)
            timer.start()
            with pytest.raises(RuntimeError):
                timer.tick()
            await timer.task
            return timer

        timer = asyncio.run(scenario())
        assert timer.remaining_seconds == 0
        assert not timer.running


class TestExamSessionOnEventLoop:
    def test_countdown_finishes_exam_without_manual_ticks(self, submitted):
        async def take_exam():
            session = ExamSession(on_complete=submitted.append, tick_interval=0)
            session.start(_exam(_closed(1, "A"), _closed(2, "B")), duration_minutes=1)
            session.answer(1, "A")
            assert session.timer.running
            with pytest.raises(InvalidTransitionError):
                session.tick()
            await asyncio.wait_for(session.timer.task, timeout=5)
            return session

        session = asyncio.run(take_exam())
        assert session.status == ExamSessionStatusEnum.COMPLETED
        assert session.remaining_seconds == 0
        assert len(submitted) == 1
        assert submitted[0].percent == 50.0

    def test_countdown_moves_open_exam_to_grading(self, submitted):
        async def take_exam():
            session = ExamSession(on_complete=submitted.append, tick_interval=0)
            session.start(_exam(_open(1, points=2)), duration_minutes=1)
            await asyncio.wait_for(session.timer.task, timeout=5)
            return session

        session = asyncio.run(take_exam())
        assert session.status == ExamSessionStatusEnum.GRADING
        assert submitted == []
        session.grade(2)
        assert len(submitted) == 1

    def test_finishing_early_stops_countdown(self, submitted):
        async def take_exam():
            session = ExamSession(on_complete=submitted.append, tick_interval=0)
            session.start(_exam(_closed(1, "A")), duration_minutes=1)
            task = session.timer.task
            await asyncio.sleep(0)
            session.finish("A")
            await asyncio.gather(task, return_exceptions=True)
            return task

        task = asyncio.run(take_exam())
        assert task.cancelled()
        assert len(submitted) == 1

    def test_abandon_cancels_countdown(self, submitted):
        async def take_exam():
            session = ExamSession(on_complete=submitted.append, tick_interval=0)
            session.start(_exam(_closed(1, "A")), duration_minutes=1)
            task = session.timer.task
            session.abandon()
            await asyncio.gather(task, return_exceptions=True)
            return session, task

        session, task = asyncio.run(take_exam())
        assert task.cancelled()
        assert session.status == ExamSessionStatusEnum.ABANDONED
        assert submitted == []
