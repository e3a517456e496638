import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_config_dir
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "kbagent"

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_TIMEOUT = 30.0
DEFAULT_KB_PATH = "knowledge_base.json"
EXIT_KEYWORD = "выход"


def env_file_candidates() -> list:
    """Local .env first, then the per-user config directory"""
    return [Path.cwd() / ".env", Path(user_config_dir(APP_NAME)) / ".env"]


def load_env_file(path: Optional[str] = None) -> Optional[Path]:
    """Load the first .env file found into os.environ.

    Variables already present in the process environment are left untouched.
    A missing file is not fatal, the process environment is used as-is.
    """
    candidates = [Path(path)] if path else env_file_candidates()

    for candidate in candidates:
        if candidate.is_file():
            load_dotenv(candidate, override=False)
            logger.debug(f"Loaded environment from {candidate}")
            return candidate

    logger.warning(
        ".env not loaded: no file at " + ", ".join(str(c) for c in candidates)
    )
    return None


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT
    # Only an explicit opt-in may switch certificate checks off
    verify_ssl: bool = True
    kb_path: Path = Path(DEFAULT_KB_PATH)
    exit_keyword: str = EXIT_KEYWORD

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from environment variables, then apply non-None overrides"""
        values = {
            "api_key": os.getenv("DEEPSEEK_API_KEY"),
            "base_url": os.getenv("DEEPSEEK_BASE_URL", DEFAULT_BASE_URL),
            "model": os.getenv("DEEPSEEK_MODEL", DEFAULT_MODEL),
            "timeout": os.getenv("DEEPSEEK_TIMEOUT", str(DEFAULT_TIMEOUT)),
            "verify_ssl": os.getenv("DEEPSEEK_INSECURE_SKIP_VERIFY", "false").lower() != "true",
            "kb_path": os.getenv("KB_PATH", DEFAULT_KB_PATH),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
