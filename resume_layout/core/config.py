# File: resume_layout/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    PROJECT_NAME: str = "Resume Layout API"
    PROJECT_VERSION: str = "0.1.0"

    # Page settings
    PAGE_FORMAT: str = os.getenv("PAGE_FORMAT", "a4").lower()
    BORDER_MARGIN_IN: float = float(os.getenv("BORDER_MARGIN_IN", "0.3"))
    CONTENT_PADDING: float = float(os.getenv("CONTENT_PADDING", "8"))

    # Typography
    FONT_FAMILY: str = os.getenv("FONT_FAMILY", "times").lower()
    BODY_FONT_SIZE: float = float(os.getenv("BODY_FONT_SIZE", "12"))
    # 1.15 leading, tightened by 5%
    LINE_HEIGHT_FACTOR: float = float(os.getenv("LINE_HEIGHT_FACTOR", "1.0925"))

    # Export settings
    DEFAULT_EXPORT_FILENAME: str = os.getenv("DEFAULT_EXPORT_FILENAME", "Tailored-Resume.pdf")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS settings
    CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")

settings = Settings()
