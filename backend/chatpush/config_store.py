"""Config store: optional config file (master over env) plus in-memory overrides."""
import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML or JSON config file into a flat dict. Missing or invalid files give {}."""
    if not path.exists():
        logger.debug("Config file not found: %s (optional; using env/defaults)", path)
        return {}
    try:
        raw = path.read_text()
    except OSError as e:
        logger.warning("Could not read config file %s: %s", path, e)
        return {}
    suffix = path.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        elif suffix == ".json":
            data = json.loads(raw)
        else:
            logger.warning("Config file must be .yaml, .yml, or .json: %s", path)
            return {}
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file must contain a mapping; got %s", type(data).__name__)
        return {}
    return data


class ConfigStore:
    """
    Holds settings built from env, an optional config file and pushed overrides.
    Precedence: overrides > config file > env > defaults.
    """

    def __init__(self, SettingsCls: type, config_file_path: Optional[str] = None):
        self._SettingsCls = SettingsCls
        self._file_path: Optional[Path] = None
        if config_file_path:
            self._file_path = Path(config_file_path).expanduser().resolve()
        self._overrides: dict[str, Any] = {}
        self._current: Optional[Any] = None
        self._lock = threading.RLock()

    def _build(self) -> Any:
        env_dict = self._SettingsCls().model_dump()
        file_dict = _read_config_file(self._file_path) if self._file_path else {}
        if file_dict:
            logger.info("Loaded config file (master over env): %s", self._file_path)
        return self._SettingsCls(**{**env_dict, **file_dict, **self._overrides})

    def load_initial(self) -> None:
        """Build settings once at startup."""
        with self._lock:
            self._current = self._build()

    def get_settings(self) -> Any:
        with self._lock:
            if self._current is None:
                self._current = self._build()
            return self._current

    def update(self, overrides: dict[str, Any]) -> None:
        """Apply overrides and rebuild. An invalid override set leaves the previous settings in place."""
        with self._lock:
            current = self.get_settings()
            try:
                self._current = self._SettingsCls(**{**current.model_dump(), **overrides})
            except Exception as e:
                logger.warning("Config update validation failed; keeping previous config: %s", e)
                return
            self._overrides.update(overrides)

    def clear_overrides(self) -> None:
        """Drop overrides and rebuild from file + env."""
        with self._lock:
            self._overrides.clear()
            self._current = self._build()
