"""
colorpeek Configuration
Manages environment variables and defaults for palette extraction services.
"""
import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Configuration class for colorpeek services."""

    # Downscale bound and sampling stride
    MAX_EDGE: int = int(os.environ.get("COLORPEEK_MAX_EDGE", "100"))
    SAMPLE_STEP: int = int(os.environ.get("COLORPEEK_SAMPLE_STEP", "10"))

    # Clustering defaults
    DEFAULT_K: int = int(os.environ.get("COLORPEEK_DEFAULT_K", "3"))
    MAX_K: int = int(os.environ.get("COLORPEEK_MAX_K", "16"))
    MAX_ITERATIONS: int = int(os.environ.get("COLORPEEK_MAX_ITERATIONS", "20"))

    # Acquisition
    PROXY_URL_TEMPLATE: str = os.environ.get(
        "COLORPEEK_PROXY_URL_TEMPLATE", "https://images.weserv.nl/?url={url}"
    )
    FETCH_TIMEOUT: float = float(os.environ.get("COLORPEEK_FETCH_TIMEOUT", "10"))
    MAX_FILE_MB: int = int(os.environ.get("COLORPEEK_MAX_FILE_MB", "10"))

    # Logging
    LOG_LEVEL: str = os.environ.get("COLORPEEK_LOG_LEVEL", "INFO")

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("COLORPEEK_ALLOWED_ORIGINS", "*")

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/webp", "image/gif"]
    SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}

    @classmethod
    def allowed_origins(cls) -> list:
        """Parse the comma-separated CORS origins."""
        return [origin.strip() for origin in cls.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Global config instance
config = Config()
