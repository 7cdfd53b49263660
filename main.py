from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.database import Base, engine
from app.core.logging import configure_logging
from app.endpoints import auth, task, exam, progress, result, stats, upload
from app.middleware.exceptions import global_exception_handler, http_exception_handler, validation_exception_handler
from app.middleware.logging import RequestLoggingMiddleware

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(task.router, prefix="/tasks", tags=["Tasks"])
app.include_router(exam.router, prefix="/exams", tags=["Exams"])
app.include_router(progress.router, prefix="/progress", tags=["Progress"])
app.include_router(result.router, prefix="/results", tags=["Results"])
app.include_router(stats.router, prefix="/stats", tags=["Stats"])
app.include_router(upload.router, prefix="/uploads", tags=["Uploads"])

if settings.FILE_STORE_BACKEND == "local":
    Path(settings.UPLOADS_DIR).mkdir(parents=True, exist_ok=True)
    app.mount(settings.UPLOADS_URL_PREFIX, StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")

@app.on_event("startup")
async def startup_event():
    configure_logging()
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
