from pydantic import BaseModel
from typing import List

class UploadResult(BaseModel):
    urls: List[str]
