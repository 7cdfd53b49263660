import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from app.core.constants import ExamSessionStatusEnum, PracticeModeEnum, TaskKindEnum
from app.schemas.exam import ExamDetail
from app.schemas.result import ExamResultCreate, TaskOutcome
from app.schemas.task import Task
from app.session.errors import EmptyExamError, GradeValidationError, InvalidTransitionError
from app.session.timer import CountdownTimer

logger = logging.getLogger(__name__)

ResultCallback = Callable[[ExamResultCreate], Any]


def answers_match(user_answer: Optional[str], correct_answer: str) -> bool:
    if not user_answer:
        return False
    return user_answer.strip().lower() == (correct_answer or "").strip().lower()


def _parse_grade(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("not a number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("not a whole number")
        return int(value)
    return int(str(value).strip())


class ExamSession:
    """One timed exam attempt, held entirely on the client.

    NOT_STARTED -> IN_PROGRESS -> GRADING (only when the exam has open tasks)
    -> COMPLETED. An attempt in progress or in grading can be abandoned, which
    discards it without sending anything.
    """

    def __init__(self, on_complete: Optional[ResultCallback] = None, tick_interval: float = 1.0):
        self._on_complete = on_complete
        self._tick_interval = tick_interval
        self._timer: Optional[CountdownTimer] = None
        self._reset_state()
        self.status = ExamSessionStatusEnum.NOT_STARTED

    def _reset_state(self):
        self.exam_id: Optional[int] = None
        self.exam_name: Optional[str] = None
        self.mode = PracticeModeEnum.STANDARD
        self.tasks: List[Task] = []
        self.current_index = 0
        self.answers: Dict[int, str] = {}
        self.open_grades: Dict[int, int] = {}
        self.result: Optional[ExamResultCreate] = None
        self._grading_index = 0

    def _require_status(self, *allowed: ExamSessionStatusEnum):
        if self.status not in allowed:
            raise InvalidTransitionError(f"Not allowed while the exam is {self.status.value}.")

    @property
    def remaining_seconds(self) -> Optional[int]:
        return self._timer.remaining_seconds if self._timer else None

    @property
    def timer(self) -> Optional[CountdownTimer]:
        return self._timer

    @property
    def current_task(self) -> Optional[Task]:
        if self.status != ExamSessionStatusEnum.IN_PROGRESS:
            return None
        return self.tasks[self.current_index]

    @property
    def open_tasks(self) -> List[Task]:
        return [t for t in self.tasks if t.kind == TaskKindEnum.OPEN]

    @property
    def current_grading_task(self) -> Optional[Task]:
        if self.status != ExamSessionStatusEnum.GRADING:
            return None
        open_tasks = self.open_tasks
        if self._grading_index >= len(open_tasks):
            return None
        return open_tasks[self._grading_index]

    def start(self, exam: ExamDetail, duration_minutes: int = 0, theme: PracticeModeEnum = PracticeModeEnum.STANDARD):
        self._require_status(ExamSessionStatusEnum.NOT_STARTED)
        if not exam.tasks:
            raise EmptyExamError("This exam is empty or could not be loaded.")

        self.exam_id = exam.id
        self.exam_name = exam.name
        self.mode = PracticeModeEnum(theme)
        self.tasks = list(exam.tasks)
        self.status = ExamSessionStatusEnum.IN_PROGRESS

        if duration_minutes and duration_minutes > 0:
            self._timer = CountdownTimer(duration_minutes * 60, self._on_time_up, interval=self._tick_interval)
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                # No event loop: the caller drives the countdown with tick()
                pass
            else:
                self._timer.start()
        logger.debug(f"Exam {self.exam_id} started with {len(self.tasks)} task(s)")

    def tick(self, seconds: int = 1) -> Optional[int]:
        if self._timer is None:
            return None
        if self._timer.running:
            raise InvalidTransitionError("The countdown is already running on the event loop.")
        return self._timer.tick(seconds)

    def _on_time_up(self):
        logger.info(f"Time is up for exam {self.exam_id}")
        if self.status == ExamSessionStatusEnum.IN_PROGRESS:
            self.finish()

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()

    def answer(self, task_id: int, value: Optional[str]):
        """Buffer an answer. Blank values keep whatever was recorded before."""
        self._require_status(ExamSessionStatusEnum.IN_PROGRESS)
        if value is None or value == "":
            return
        self.answers[task_id] = value

    def _save_visible(self, visible_answer: Optional[str]):
        self.answer(self.tasks[self.current_index].id, visible_answer)

    def navigate(self, direction: int, visible_answer: Optional[str] = None):
        self._require_status(ExamSessionStatusEnum.IN_PROGRESS)
        if direction not in (1, -1):
            raise ValueError("direction must be +1 or -1")

        self._save_visible(visible_answer)
        new_index = self.current_index + direction
        if new_index < 0:
            return
        if new_index >= len(self.tasks):
            self.finish()
            return
        self.current_index = new_index

    def finish(self, visible_answer: Optional[str] = None):
        self._require_status(ExamSessionStatusEnum.IN_PROGRESS)
        self._save_visible(visible_answer)
        self._cancel_timer()

        if self.open_tasks:
            self._grading_index = 0
            self.status = ExamSessionStatusEnum.GRADING
            return
        self._complete()

    def grade(self, value: Any):
        """Self-assess the open task currently presented for grading."""
        self._require_status(ExamSessionStatusEnum.GRADING)
        task = self.current_grading_task
        if task is None:
            raise InvalidTransitionError("All open tasks are already graded.")

        try:
            points = _parse_grade(value)
        except (TypeError, ValueError):
            raise GradeValidationError(f"Enter a whole number between 0 and {task.points}.")
        if not 0 <= points <= task.points:
            raise GradeValidationError(f"Enter a whole number between 0 and {task.points}.")

        self.open_grades[task.id] = points
        self._grading_index += 1
        if self._grading_index >= len(self.open_tasks):
            self._complete()

    def score(self) -> ExamResultCreate:
        """Build the final result.

        Closed tasks always weigh 1 point in an exam whatever their configured
        points; open tasks weigh their configured points.
        """
        earned = total = wrong = 0
        closed_correct = closed_wrong = open_correct = open_wrong = 0
        outcomes = []

        for task in self.tasks:
            if task.kind == TaskKindEnum.CLOSED:
                is_correct = answers_match(self.answers.get(task.id), task.correct_answer)
                task_earned = 1 if is_correct else 0
                total += 1
                if is_correct:
                    closed_correct += 1
                else:
                    closed_wrong += 1
            else:
                task_earned = self.open_grades.get(task.id, 0)
                is_correct = task_earned == task.points
                total += task.points
                if is_correct:
                    open_correct += 1
                else:
                    open_wrong += 1

            earned += task_earned
            if not is_correct:
                wrong += 1
            outcomes.append(TaskOutcome(task_id=task.id, is_correct=is_correct, earned_points=task_earned))

        percent = round(earned * 100 / total, 2) if total else 0.0
        return ExamResultCreate(
            exam_id=self.exam_id,
            exam_name=self.exam_name,
            mode=self.mode,
            earned_points=earned,
            total_points=total,
            wrong_count=wrong,
            percent=percent,
            closed_correct=closed_correct,
            closed_wrong=closed_wrong,
            open_correct=open_correct,
            open_wrong=open_wrong,
            outcomes=outcomes
        )

    def _complete(self):
        self.result = self.score()
        self._submit()

    def _submit(self):
        if self._on_complete is not None:
            self._on_complete(self.result)
        self.status = ExamSessionStatusEnum.COMPLETED
        logger.debug(f"Exam {self.exam_id} completed with {self.result.percent}%")

    def resubmit(self):
        """Send the computed result again after a failed submission."""
        if self.result is None or self.status == ExamSessionStatusEnum.COMPLETED:
            raise InvalidTransitionError("There is no pending result to submit.")
        self._submit()

    def abandon(self):
        if self.status not in (ExamSessionStatusEnum.IN_PROGRESS, ExamSessionStatusEnum.GRADING):
            return
        self._cancel_timer()
        self._timer = None
        self._reset_state()
        self.status = ExamSessionStatusEnum.ABANDONED
        logger.debug("Exam session abandoned")
