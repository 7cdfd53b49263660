from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.exam import ExamCreate, ExamDetail, ExamRename, ExamSummary
from app.schemas.response import APIResponse
from app.services.exam import exam_service
from app.utils import deps

router = APIRouter()

@router.post("/", response_model=APIResponse[ExamSummary], status_code=status.HTTP_201_CREATED)
def create_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_in: ExamCreate,
    current_user: User = Depends(deps.require_admin)
):
    new_exam = exam_service.create_exam(db, exam_in=exam_in, current_user=current_user)
    return APIResponse(message="Exam created successfully", data=ExamSummary.model_validate(new_exam))


@router.get("/", response_model=APIResponse[List[ExamSummary]])
def get_all_exams(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user)
):
    exams = exam_service.list_exams(db)
    return APIResponse(message="Exams retrieved successfully", data=[ExamSummary.model_validate(e) for e in exams])


@router.get("/{exam_id}", response_model=APIResponse[ExamDetail])
def get_exam(
    *,
    db: Session = Depends(deps.get_db),
    exam_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    exam = exam_service.get_exam(db, exam_id=exam_id)
    return APIResponse(message="Exam retrieved successfully", data=exam)


@router.patch("/{exam_id}", response_model=APIResponse[ExamSummary])
def rename_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    exam_in: ExamRename,
    current_user: User = Depends(deps.require_admin)
):
    exam = exam_service.rename_exam(db, exam_id=exam_id, exam_in=exam_in, current_user=current_user)
    return APIResponse(message="Exam renamed successfully", data=ExamSummary.model_validate(exam))


@router.delete("/{exam_id}", response_model=APIResponse[ExamSummary])
def delete_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    current_user: User = Depends(deps.require_admin)
):
    deleted_exam = exam_service.delete_exam(db, exam_id=exam_id, current_user=current_user)
    return APIResponse(message="Exam deleted successfully", data=deleted_exam)
