from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


CONFIG_ENV_VAR = "WEB_CONTENT_RETRIEVER_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "server.yaml"

DEFAULT_BASE_URL = "https://r.jina.ai/"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; web-content-retriever/1.0.0)"


def load_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Server config not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping")
    return data


def resolve_config(env: Mapping[str, str] = os.environ) -> Dict[str, Any]:
    """
    Lädt die YAML-Konfiguration.

    Ein explizit gesetzter Pfad muss existieren; die Default-Datei ist optional.
    """
    explicit = env.get(CONFIG_ENV_VAR, "").strip()
    if explicit:
        return load_config(Path(explicit))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return {}


@dataclass(frozen=True)
class Settings:
    api_token: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    server_name: str = "web-content-retriever"
    log_level: str = "INFO"

    def request_headers(self) -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers


def load_settings(config: Dict[str, Any], env: Mapping[str, str] = os.environ) -> Settings:
    server_cfg = config.get("server", {}) or {}
    reader_cfg = config.get("reader", {}) or {}
    # Blank token counts as unset
    token = env.get("JINA_API_TOKEN", "").strip() or None
    log_level = env.get("WEB_CONTENT_RETRIEVER_LOG_LEVEL", "").strip() or str(server_cfg.get("log_level", "INFO"))
    return Settings(
        api_token=token,
        base_url=str(reader_cfg.get("base_url", DEFAULT_BASE_URL)),
        timeout_seconds=float(reader_cfg.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        user_agent=str(reader_cfg.get("user_agent", DEFAULT_USER_AGENT)),
        server_name=str(server_cfg.get("name", "web-content-retriever")),
        log_level=log_level.upper(),
    )
