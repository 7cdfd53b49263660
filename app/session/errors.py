class ExamSessionError(Exception):
    """A user-visible, non-fatal problem with the exam session."""

class EmptyExamError(ExamSessionError):
    pass

class InvalidTransitionError(ExamSessionError):
    pass

class GradeValidationError(ExamSessionError):
    pass
