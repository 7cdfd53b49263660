from enum import Enum


class RoleEnum(str, Enum):
    ADMIN = "admin"
    USER = "user"

class TaskKindEnum(str, Enum):
    OPEN = "open"
    CLOSED = "closed"

class PracticeModeEnum(str, Enum):
    STANDARD = "standard"
    GAMES = "games"

class LeaderboardKindEnum(str, Enum):
    ALL = "all"
    OPEN = "open"
    CLOSED = "closed"

class ExamSessionStatusEnum(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    GRADING = "grading"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

# Exam results feed the "all" leaderboard at this rate: floor(percent / 10) * 5
EXAM_BONUS_STEP_PERCENT = 10
EXAM_BONUS_POINTS_PER_STEP = 5
