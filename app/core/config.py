from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "Quiz Practice API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ADMIN_TOKEN_EXPIRE_MINUTES: int = 60 * 8  # 8 hours
    USER_TOKEN_EXPIRE_DAYS: int = 365

    # Names that receive the admin role on registration
    ADMIN_USERNAMES: List[str] = ["admin"]

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5500"
    ]

    # Database Configuration
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: str = "5432"
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_NAME: Optional[str] = None

    DATABASE_URL: str = ""
    TEST_DATABASE_URL: Optional[str] = None
    AUTO_CREATE_TABLES: bool = True

    def __init__(self, **data):
        super().__init__(**data)
        if self.DATABASE_URL:
            return
        if self.DATABASE_HOST:
            self.DATABASE_URL = (
                f'postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}'
                f'@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}'
            )
        else:
            self.DATABASE_URL = "sqlite:///./quiz.db"

    # Uploads
    UPLOADS_DIR: str = "./uploads"
    UPLOADS_URL_PREFIX: str = "/uploads"
    FILE_STORE_BACKEND: str = "local"  # local, cloudinary

    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None

    class Config:
        env_file = ".env"

settings = Settings()
