from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path

# Configuration utilisateur persistée en JSON (data/config.json), surchargée par l'environnement.

DEFAULT_SOURCE_URL = "http://182.254.159.181/IPTV.txt"
DEFAULT_CONFIG_PATH = Path("data/config.json")

ENV_SOURCE_URL = "IPTV_SOURCE_URL"
ENV_DB_PATH = "IPTV_DB_PATH"


@dataclass
class AppConfig:
    source_url: str = DEFAULT_SOURCE_URL
    db_path: str = "data/iptv.db"
    timeout: float | None = None  # None = défaut du transport
    log_level: str = "INFO"


def load_config(path: str | Path = DEFAULT_CONFIG_PATH, env: dict | None = None) -> AppConfig:
    """Lit le JSON (clés inconnues ignorées) ; fichier absent/illisible -> valeurs par défaut."""
    path = Path(path)
    env = os.environ if env is None else env
    data: dict = {}
    try:
        if path.exists():
            raw = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(raw, dict):
                data = raw
    except (OSError, ValueError):
        data = {}

    known = {f.name for f in fields(AppConfig)}
    cfg = AppConfig(**{k: v for k, v in data.items() if k in known})

    # Valeurs texte de mauvais type (ex. "db_path": 5) -> valeur par défaut.
    defaults = AppConfig()
    for name in ("source_url", "db_path", "log_level"):
        value = getattr(cfg, name)
        if not isinstance(value, str) or not value.strip():
            setattr(cfg, name, getattr(defaults, name))

    if env.get(ENV_SOURCE_URL):
        cfg.source_url = env[ENV_SOURCE_URL]
    if env.get(ENV_DB_PATH):
        cfg.db_path = env[ENV_DB_PATH]

    if cfg.timeout is not None:
        try:
            cfg.timeout = float(cfg.timeout)
        except (TypeError, ValueError):
            cfg.timeout = None
    cfg.log_level = cfg.log_level.strip().upper()
    return cfg


def save_config(cfg: AppConfig, path: str | Path = DEFAULT_CONFIG_PATH) -> bool:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(cfg), indent=2), encoding="utf-8")
        return True
    except OSError:
        return False
