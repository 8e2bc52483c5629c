import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

ENV_PREFIX = "OUTYET_"


@dataclass(frozen=True)
class Settings:
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    POLL_PERIOD_S: float = 5.0
    VERSION: str = "1.4"
    BASE_CHANGE_URL: str = "https://go.googlesource.com/go/+/"
    WEATHER_API_URL: str = "https://api.weatherapi.com/v1/current.json"
    WEATHER_API_KEY: str = ""
    UA: str = "outyet/1.0"
    CONNECT_TIMEOUT_S: float = 5.0
    READ_TIMEOUT_S: float = 8.0
    TOTAL_TIMEOUT_S: float = 12.0
    LOG_LEVEL: str = "INFO"

    @property
    def change_url(self) -> str:
        return f"{self.BASE_CHANGE_URL}go{self.VERSION}"


def _env_key(field_name: str) -> str:
    return ENV_PREFIX + field_name


def _load_yaml(path: str | Path) -> Dict[str, Any]:
    """YAML keys are the lower-cased field names (poll_period_s, version, ...)."""
    p = Path(path)
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{p}: top level must be a mapping")
    return {str(k).upper(): v for k, v in data.items()}


def load_settings(environ: Optional[Mapping[str, str]] = None,
                  config_path: Optional[str | Path] = None) -> Settings:
    """Build Settings from defaults, then the YAML file, then environment variables."""
    if environ is None:
        load_dotenv()
        environ = os.environ
    if config_path is None:
        config_path = environ.get(_env_key("CONFIG"))

    values: Dict[str, Any] = {}
    if config_path:
        values.update(_load_yaml(config_path))

    out = {}
    for f in fields(Settings):
        raw = environ.get(_env_key(f.name))
        if raw is None:
            raw = values.get(f.name)
            if raw is None:
                continue
            # unquoted YAML like `version: 1.10` arrives as the float 1.1
            if f.type is str and not isinstance(raw, str):
                raise ValueError(f"{f.name.lower()}: expected a quoted string in {config_path}, got {raw!r}")
        try:
            out[f.name] = f.type(raw)
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid value for {_env_key(f.name)}: {raw!r}") from e

    settings = Settings(**out)
    if settings.POLL_PERIOD_S <= 0:
        raise ValueError(f"{_env_key('POLL_PERIOD_S')} must be positive")
    return settings
