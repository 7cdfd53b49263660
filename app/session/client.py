import logging
from typing import Any, List, Optional

import httpx

from app.core.constants import PracticeModeEnum, TaskKindEnum
from app.schemas.exam import ExamDetail, ExamSummary
from app.schemas.progress import ProgressRecord, ProgressResetResult, ProgressSubmit
from app.schemas.result import ExamResultCreate, ResultRecord
from app.schemas.task import Task
from app.session.exam_session import ExamSession

logger = logging.getLogger(__name__)


class QuizApiError(Exception):
    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(f"{status_code} {code}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message

    @property
    def requires_login(self) -> bool:
        """The token is missing, expired or invalid; the user has to sign in again."""
        return self.status_code == 401


class QuizApiClient:
    """Thin client over the HTTP API used by the exam and practice views.

    Any httpx.Client works as transport, including FastAPI's TestClient.
    """

    def __init__(self, http: httpx.Client, token: Optional[str] = None):
        self.http = http
        self.token = token

    def _headers(self):
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.http.request(method, path, headers=self._headers(), **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.is_error:
            error = body.get("error", {}) if isinstance(body, dict) else {}
            raise QuizApiError(
                response.status_code,
                error.get("code", f"HTTP_{response.status_code}"),
                error.get("message", response.text)
            )
        return body.get("data")

    def login(self, name: str, password: str) -> str:
        data = self._request("POST", "/auth/login", json={"name": name, "password": password})
        self.token = data["token"]["access_token"]
        return self.token

    def list_exams(self) -> List[ExamSummary]:
        return [ExamSummary.model_validate(e) for e in self._request("GET", "/exams/")]

    def get_exam(self, exam_id: int) -> ExamDetail:
        return ExamDetail.model_validate(self._request("GET", f"/exams/{exam_id}"))

    def get_random_task(
        self,
        mode: PracticeModeEnum = PracticeModeEnum.STANDARD,
        kind: Optional[TaskKindEnum] = None,
        only_incorrect: bool = False
    ) -> Optional[Task]:
        params = {"mode": PracticeModeEnum(mode).value, "only_incorrect": str(only_incorrect).lower()}
        if kind:
            params["kind"] = TaskKindEnum(kind).value
        data = self._request("GET", "/tasks/random", params=params)
        return Task.model_validate(data) if data else None

    def submit_progress(self, progress_in: ProgressSubmit) -> ProgressRecord:
        data = self._request("POST", "/progress/", json=progress_in.model_dump(mode="json"))
        return ProgressRecord.model_validate(data)

    def reset_progress(self, mode: PracticeModeEnum) -> ProgressResetResult:
        data = self._request("POST", "/progress/reset", json={"mode": PracticeModeEnum(mode).value})
        return ProgressResetResult.model_validate(data)

    def submit_exam_result(self, result_in: ExamResultCreate) -> ResultRecord:
        data = self._request("POST", "/results/", json=result_in.model_dump(mode="json"))
        return ResultRecord.model_validate(data)

    def start_exam(
        self,
        exam_id: int,
        duration_minutes: int = 0,
        theme: PracticeModeEnum = PracticeModeEnum.STANDARD,
        tick_interval: float = 1.0
    ) -> ExamSession:
        """Load the exam and open a session that reports back here on completion.

        Called from inside a running event loop, the countdown starts on that
        loop and finishes the exam by itself; otherwise drive it with tick().
        """
        exam = self.get_exam(exam_id)
        session = ExamSession(on_complete=self.submit_exam_result, tick_interval=tick_interval)
        session.start(exam, duration_minutes=duration_minutes, theme=theme)
        logger.info(f"Started exam {exam_id} ({len(exam.tasks)} task(s), {duration_minutes} min)")
        return session
