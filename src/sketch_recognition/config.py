"""Configuration loaded from a JSON file with environment overrides."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.json"


@dataclass(frozen=True)
class BaiduSettings:
    """Credentials and endpoint choice for the Baidu recognition APIs."""

    enabled: bool = False
    api_key: str = ""
    secret_key: str = ""
    endpoint: str = "animal"
    timeout: float = 10.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.secret_key)


@dataclass(frozen=True)
class DoubaoSettings:
    """Key and model for the Doubao (Volcengine Ark) chat-completions API."""

    enabled: bool = False
    api_key: str = ""
    model: str = "doubao-1.5-ui-tars-250328"
    url: str = "https://ark.cn-beijing.volces.com/api/v3/chat/completions"
    timeout: float = 30.0


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the recognition pipeline.

    Attributes:
        backend: Registry name of the active recognizer.
        seed: Optional seed for the heuristic recognizers' random source.
        delay_ms: Simulated "thinking time" range in milliseconds.
        sketch_size: Target size for sketch preprocessing.
        simplify_threshold: Brightness threshold used by the simplify stage.
        taxonomy_path: Optional JSON file replacing the built-in label tables.
        log_level: Root logging level name.
        baidu: Baidu adapter settings.
        doubao: Doubao adapter settings.
    """

    backend: str = "sketch"
    seed: Optional[int] = None
    delay_ms: Tuple[int, int] = (400, 800)
    sketch_size: Tuple[int, int] = (300, 300)
    simplify_threshold: int = 200
    taxonomy_path: Optional[str] = None
    log_level: str = "INFO"
    baidu: BaiduSettings = field(default_factory=BaiduSettings)
    doubao: DoubaoSettings = field(default_factory=DoubaoSettings)

    @property
    def delay_range(self) -> Tuple[float, float]:
        low, high = self.delay_ms
        return low / 1000.0, high / 1000.0


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _as_pair(value: Any, name: str) -> Tuple[int, int]:
    if isinstance(value, (int, float)):
        return int(value), int(value)
    try:
        first, second = value
        return int(first), int(second)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number or a pair of numbers, got {value!r}") from exc


def _load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Read the JSON config file; a missing file means defaults."""

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.info("Config file %s not found, using defaults", config_path)
        return {}
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Config file {config_path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a JSON object")
    return data


def settings_from_dict(config: Dict[str, Any]) -> Settings:
    """Build :class:`Settings` from a parsed config dictionary."""

    recognition_config = config.get("recognition") or {}
    preprocessing_config = config.get("preprocessing") or {}
    baidu_config = config.get("baidu") or {}
    doubao_config = config.get("doubao") or {}
    logging_config = config.get("logging") or {}

    baidu = BaiduSettings(
        enabled=_as_bool(os.getenv("BAIDU_ENABLED", baidu_config.get("enabled", False))),
        api_key=os.getenv("BAIDU_API_KEY", baidu_config.get("api_key", "")),
        secret_key=os.getenv("BAIDU_SECRET_KEY", baidu_config.get("secret_key", "")),
        endpoint=baidu_config.get("endpoint", "animal"),
        timeout=float(baidu_config.get("timeout", 10.0)),
    )

    doubao = DoubaoSettings(
        enabled=_as_bool(os.getenv("DOUBAO_ENABLED", doubao_config.get("enabled", False))),
        api_key=os.getenv("DOUBAO_API_KEY", doubao_config.get("api_key", "")),
        model=doubao_config.get("model", DoubaoSettings.model),
        url=doubao_config.get("url", DoubaoSettings.url),
        timeout=float(doubao_config.get("timeout", 30.0)),
    )

    seed = recognition_config.get("seed")
    threshold = int(preprocessing_config.get("simplify_threshold", 200))
    if not 0 <= threshold <= 255:
        raise ConfigurationError(f"simplify_threshold must be between 0 and 255, got {threshold}")

    return Settings(
        backend=recognition_config.get("backend", "sketch"),
        seed=int(seed) if seed is not None else None,
        delay_ms=_as_pair(recognition_config.get("delay_ms", (400, 800)), "delay_ms"),
        sketch_size=_as_pair(preprocessing_config.get("sketch_size", (300, 300)), "sketch_size"),
        simplify_threshold=threshold,
        taxonomy_path=recognition_config.get("taxonomy_path"),
        log_level=os.getenv("LOG_LEVEL", logging_config.get("level", "INFO")),
        baidu=baidu,
        doubao=doubao,
    )


def load_settings(config_path: Union[str, Path, None] = None) -> Settings:
    """Load settings from ``config_path`` (default ``config.json``)."""

    return settings_from_dict(_load_config(config_path or DEFAULT_CONFIG_PATH))


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger for command-line use."""

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
