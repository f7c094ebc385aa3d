from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Budget Summary Service"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # Document defaults
    DEFAULT_LANGUAGE: str = "es"
    DEFAULT_FORMAT: str = "docx"
    FILE_NAME_FALLBACK: str = "presupuesto"
    PAGE_MARGIN_TWIPS: int = 720  # ~0.5 inch

    # Where save_to_directory() writes when no folder is given
    OUTPUT_DIR: str = "./output"

    class Config:
        env_file = ".env"


settings = Settings()
