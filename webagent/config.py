from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
import tomllib, os

PROFILES = ["instant", "demo"]

@dataclass
class General:
    profile: str = "instant"
    default_platform: str = "linkedin"
    log_dir: str = "data/logs"
    kill_switch_path: str = "data/kill.switch"

@dataclass
class Pacing:
    # délais d'observabilité (ms), sans effet sur l'ordre des événements
    event_pacing_ms: int = 0
    parse_delay_ms: int = 0
    plan_delay_ms: int = 0
    step_delay_ms: int = 0

@dataclass
class Executor:
    honor_waits: bool = False

@dataclass
class Web:
    host: str = "127.0.0.1"
    port: int = 8765

@dataclass
class Settings:
    general: General
    pacing: Pacing
    executor: Executor
    web: Web

def _load_toml_if_exists(path: Path) -> dict:
    if path.exists():
        with path.open("rb") as f:
            return tomllib.load(f)
    return {}

def _read_profile_toml(config_path: Path, profile: str) -> dict:
    """
    Cherche dans:
      - config/defaults.toml et config/<profile>.toml
      - puis fallback: config/profiles/defaults.toml et config/profiles/<profile>.toml
    """
    cfg_dir = config_path if config_path.is_dir() else config_path.parent

    data = _load_toml_if_exists(cfg_dir / "defaults.toml")
    if not data:
        data = _load_toml_if_exists(cfg_dir / "profiles" / "defaults.toml")

    prof = _load_toml_if_exists(cfg_dir / f"{profile}.toml")
    if not prof:
        prof = _load_toml_if_exists(cfg_dir / "profiles" / f"{profile}.toml")

    # Fusion superficielle defaults <- profil
    base = data or {}
    for k, v in prof.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k].update(v)
        else:
            base[k] = v
    return base

def _filter_for_dataclass(cls, data: dict) -> dict:
    """Ne garde que les clés connues du dataclass (évite TypeError sur clés en trop)."""
    allowed = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in allowed}

def load_settings(config: str | None, profile: str, overrides: dict | None = None) -> Settings:
    config_path = Path(config) if config else Path("config")
    raw = _read_profile_toml(config_path, profile)

    if "general" not in raw:
        raw["general"] = {}
    raw["general"]["profile"] = profile
    # Chemin du kill-switch via env prioritaire
    env_kill = os.environ.get("WEBAGENT_KILL_SWITCH")
    if env_kill:
        raw["general"]["kill_switch_path"] = env_kill

    g = General(**_filter_for_dataclass(General, raw.get("general")))
    p = Pacing(**_filter_for_dataclass(Pacing, raw.get("pacing")))
    x = Executor(**_filter_for_dataclass(Executor, raw.get("executor")))
    w = Web(**_filter_for_dataclass(Web, raw.get("web")))

    # Overrides (seulement sur General pour l’instant)
    if overrides:
        for k, v in overrides.items():
            if hasattr(g, k):
                setattr(g, k, v)

    return Settings(general=g, pacing=p, executor=x, web=w)
