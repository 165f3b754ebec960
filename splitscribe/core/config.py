import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv
from pydantic import SecretStr

from .models import AppConfig, TranscribeConfig, SplitConfig, CombineConfig
from ..constants import API_KEY_ENV
from ..errors import MissingCredentialError

# Load environment variables from .env file
load_dotenv()

DEFAULT_CONFIG_FILENAME = "splitscribe.yaml"

def load_yaml(path: Path) -> Dict[str, Any]:
    if path.exists():
        with open(path, "r") as f:
            return yaml.safe_load(f) or {}
    return {}

def find_config_file() -> Optional[Path]:
    """Search order: current dir -> user home."""
    cwd_config = Path(DEFAULT_CONFIG_FILENAME)
    home_config = Path.home() / ".config" / "splitscribe" / "config.yaml"

    if cwd_config.exists():
        return cwd_config
    if home_config.exists():
        return home_config
    return None

def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from file and env vars."""

    # 1. Determine config path
    user_config_path = Path(config_path) if config_path else find_config_file()

    # 2. Load user config
    user_config = load_yaml(user_config_path) if user_config_path else {}

    # 3. Parse sections
    transcribe = TranscribeConfig(**(user_config.get("transcribe") or {}))
    split = SplitConfig(**(user_config.get("split") or {}))
    combine = CombineConfig(**(user_config.get("combine") or {}))

    # Environment wins over the file for the credential
    env_key = os.environ.get(API_KEY_ENV)
    if env_key:
        transcribe.api_key = SecretStr(env_key)

    return AppConfig(
        transcribe=transcribe,
        split=split,
        combine=combine,
        debug=user_config.get("debug", False),
        log_dir=user_config.get("log_dir"),
    )

def require_api_key(config: AppConfig) -> str:
    """Return the transcription API key or fail fast."""
    api_key = config.transcribe.api_key.get_secret_value() if config.transcribe.api_key else ""
    if not api_key:
        raise MissingCredentialError(f"{API_KEY_ENV} environment variable is required")
    return api_key
