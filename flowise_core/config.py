"""Pydantic settings loaded from .env, with conf.json overlay."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent

# ---------------------------------------------------------------------------
# conf.json: runtime config (separate from .env secrets)
# ---------------------------------------------------------------------------


def get_core_dir() -> Path:
    """Resolve the data directory. FLOWISE_CORE_DIR env var or ~/.config/flowise-core."""
    d = os.environ.get("FLOWISE_CORE_DIR", "")
    return Path(d).expanduser() if d else Path.home() / ".config" / "flowise-core"


class CoreConfig(BaseModel):
    log_level: str = ""
    log_file: str = ""
    node_catalog_path: str = ""
    default_provider: str = ""
    providers: list[dict] = []


_logger = logging.getLogger(__name__)


def load_conf() -> CoreConfig:
    """Load conf.json from the data directory."""
    conf_path = get_core_dir() / "conf.json"
    if conf_path.exists():
        try:
            return CoreConfig.model_validate_json(conf_path.read_text())
        except Exception:
            _logger.warning("Failed to parse %s, using defaults", conf_path, exc_info=True)
    return CoreConfig()


def save_conf(config: CoreConfig) -> None:
    """Save conf.json to the data directory."""
    core_dir = get_core_dir()
    core_dir.mkdir(parents=True, exist_ok=True)
    (core_dir / "conf.json").write_text(config.model_dump_json(indent=2))


# ---------------------------------------------------------------------------
# Bootstrap: load .env, load conf.json
# ---------------------------------------------------------------------------

_env_file = BASE_DIR.parent / ".env"
load_dotenv(_env_file)
_conf = load_conf()

# ---------------------------------------------------------------------------
# Settings (pydantic-settings): .env / env vars override conf.json defaults
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    DEBUG: bool = False

    LOG_LEVEL: str = _conf.log_level or "INFO"
    LOG_FILE: str = _conf.log_file or ""
    LOG_MAX_BYTES: int = 10_485_760
    LOG_BACKUP_COUNT: int = 5

    CORS_ALLOW_ALL_ORIGINS: bool = True

    NODE_CATALOG_PATH: str = _conf.node_catalog_path or str(BASE_DIR / "data" / "flowise_nodes.json")

    # Provider credentials
    DEFAULT_PROVIDER: str = _conf.default_provider or "openai"
    OPENAI_API_KEY: str = ""
    ZAI_API_KEY: str = ""

    # Search tool credentials wired into assistant graphs
    GOOGLE_API_KEY: str = ""
    GOOGLE_SEARCH_ENGINE_ID: str = ""

    # Validator heuristics
    VALIDATION_ERROR_PENALTY: int = 20
    VALIDATION_WARNING_PENALTY: int = 5
    MAX_EXECUTION_PATHS: int = 256

    model_config = ConfigDict(
        env_file=str(BASE_DIR.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
