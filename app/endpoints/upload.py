from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.models.user import User
from app.schemas.response import APIResponse
from app.schemas.upload import UploadResult
from app.services.file_store import FileStore, get_file_store
from app.utils import deps
from app.utils.logger import setup_logger

logger = setup_logger("upload_api", "upload.log")

router = APIRouter()

@router.post("/", response_model=APIResponse[UploadResult], status_code=status.HTTP_201_CREATED)
def upload_files(
    files: List[UploadFile] = File(...),
    current_user: User = Depends(deps.require_admin),
    file_store: FileStore = Depends(get_file_store)
):
    """Store every file or none of them; URLs come back in request order."""
    if not files:
        raise HTTPException(status_code=400, detail="No files provided.")

    urls = []
    for upload in files:
        try:
            urls.append(file_store.store(upload.file.read(), upload.filename))
        except Exception as e:
            logger.error(f"Upload error for user {current_user.id} on {upload.filename}: {str(e)}")
            _discard_stored(file_store, urls)
            raise HTTPException(status_code=500, detail=f"Failed to upload file {upload.filename}")
        logger.info(f"User {current_user.id} uploaded file: {upload.filename}")

    return APIResponse(message="Files uploaded successfully", data=UploadResult(urls=urls))


def _discard_stored(file_store: FileStore, urls: List[str]):
    for url in urls:
        try:
            file_store.discard(url)
        except Exception as e:
            logger.error(f"Could not remove {url} after a failed upload: {str(e)}")
        else:
            logger.info(f"Removed {url} after a failed upload")
