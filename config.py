# User value: This file keeps page conversion settings fixed for the whole process so every request behaves the same way.
import os
import tempfile
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_MODEL_NAME = "llama-vision-mini"

ALLOWED_EXTENSIONS = (
    ".txt", ".md", ".docx", ".pdf", ".py", ".js", ".java",
    ".c", ".cpp", ".cs", ".rb", ".go", ".rs", ".php",
    ".html", ".css", ".json", ".xml", ".sh", ".bat",
)


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, resolved once from the environment."""

    default_model_name: str
    openai_api_key: str
    openai_base_url: str | None
    model_timeout_sec: float
    model_max_retries: int
    max_upload_size_mb: int
    upload_tmp_dir: str
    allowed_extensions: frozenset[str] = frozenset(ALLOWED_EXTENSIONS)

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    return Settings(
        default_model_name=(os.getenv("DEFAULT_MODEL_NAME") or "").strip() or DEFAULT_MODEL_NAME,
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
        model_timeout_sec=float(os.getenv("MODEL_TIMEOUT_SEC", "120")),
        model_max_retries=int(os.getenv("MODEL_MAX_RETRIES", "2")),
        max_upload_size_mb=int(os.getenv("MAX_UPLOAD_SIZE_MB", "50")),
        upload_tmp_dir=(os.getenv("UPLOAD_TMP_DIR") or "").strip() or tempfile.gettempdir(),
    )
