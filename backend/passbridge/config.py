"""Broker configuration with CLI > env var > persisted settings > defaults precedence."""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from .logging import get_logger

logger = get_logger("config")

PASSBRIDGE_DIR = Path.home() / ".passbridge"
SETTINGS_FILE = PASSBRIDGE_DIR / "settings.json"

DEFAULT_PASSWORD_MANAGER = "Bitwarden"
DEFAULT_BINARY_PATH = "/usr/bin/bw"
DEFAULT_EXEC_TIMEOUT_MS = 10000
DEFAULT_PORT = 8200

# Slider limits for the exec timeout
MIN_EXEC_TIMEOUT_MS = 5000
MAX_EXEC_TIMEOUT_MS = 25000
EXEC_TIMEOUT_STEP_MS = 1000


def clamp_timeout(value: int) -> int:
    """Clamp a timeout into the slider range and snap it to the slider step."""
    value = max(MIN_EXEC_TIMEOUT_MS, min(MAX_EXEC_TIMEOUT_MS, int(value)))
    steps = round((value - MIN_EXEC_TIMEOUT_MS) / EXEC_TIMEOUT_STEP_MS)
    return MIN_EXEC_TIMEOUT_MS + steps * EXEC_TIMEOUT_STEP_MS


@dataclass
class PluginSettings:
    """The persisted, user-editable settings. Never holds the session token."""
    password_manager: str = DEFAULT_PASSWORD_MANAGER
    binary_path: str = DEFAULT_BINARY_PATH
    exec_timeout_ms: int = DEFAULT_EXEC_TIMEOUT_MS

    def __post_init__(self):
        self.exec_timeout_ms = clamp_timeout(self.exec_timeout_ms)

    def to_dict(self) -> dict:
        return asdict(self)


def _validated(data: dict, path: Path) -> dict:
    """Keep only known settings whose values are usable."""
    from .vault.providers import PasswordManager

    known = {}
    for key in PluginSettings.__dataclass_fields__:
        if key not in data:
            continue
        value = data[key]
        if key in ("password_manager", "binary_path") and (not isinstance(value, str) or not value):
            logger.warning(f"Ignoring {key} in {path}: expected a non-empty string, got {value!r}")
            continue
        if key == "password_manager" and value not in {m.value for m in PasswordManager}:
            logger.warning(f"Ignoring {key} in {path}: unsupported password manager {value!r}")
            continue
        if key == "exec_timeout_ms" and (isinstance(value, bool) or not isinstance(value, int)):
            logger.warning(f"Ignoring {key} in {path}: expected an integer, got {value!r}")
            continue
        known[key] = value
    return known


def load_settings(path: Optional[Path] = None) -> PluginSettings:
    """Load persisted settings, falling back to defaults for anything missing or unusable."""
    path = path or SETTINGS_FILE
    if not path.exists():
        return PluginSettings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        logger.warning(f"Ignoring malformed settings file {path}: {e}")
        return PluginSettings()
    if not isinstance(data, dict):
        logger.warning(f"Ignoring malformed settings file {path}: expected a JSON object")
        return PluginSettings()

    return PluginSettings(**_validated(data, path))


def save_settings(settings: PluginSettings, path: Optional[Path] = None) -> Path:
    """Persist settings as JSON."""
    path = path or SETTINGS_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
    logger.info(f"Settings saved to {path}")
    return path


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring {name}={value!r}: not an integer")
        return None


@dataclass
class BrokerConfig:
    """Configuration for a passbridge process. None means "not given"."""
    password_manager: str = ""
    binary_path: str = ""
    exec_timeout_ms: Optional[int] = None
    host: str = "127.0.0.1"
    port: Optional[int] = None
    settings_path: Optional[Path] = None

    def __post_init__(self):
        persisted = load_settings(self.settings_path)

        # Env vars beat persisted settings, explicit values beat both
        if not self.password_manager:
            self.password_manager = persisted.password_manager
        if not self.binary_path:
            self.binary_path = os.getenv("PASSBRIDGE_BW_BINARY") or persisted.binary_path
        if self.exec_timeout_ms is None:
            env_timeout = _env_int("PASSBRIDGE_EXEC_TIMEOUT")
            self.exec_timeout_ms = env_timeout if env_timeout is not None else persisted.exec_timeout_ms
        self.exec_timeout_ms = clamp_timeout(self.exec_timeout_ms)
        if self.port is None:
            env_port = _env_int("PASSBRIDGE_PORT")
            self.port = env_port if env_port is not None else DEFAULT_PORT

    @property
    def settings(self) -> PluginSettings:
        return PluginSettings(
            password_manager=self.password_manager,
            binary_path=self.binary_path,
            exec_timeout_ms=self.exec_timeout_ms,
        )

    def apply(self, settings: PluginSettings) -> None:
        """Adopt new settings in the running process."""
        self.password_manager = settings.password_manager
        self.binary_path = settings.binary_path
        self.exec_timeout_ms = clamp_timeout(settings.exec_timeout_ms)
