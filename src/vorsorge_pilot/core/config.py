"""Application configuration — loaded from config.json at project root."""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    sv_rate: Decimal = Decimal("0.20")   # employee share of social security
    other_pension_contributions: Decimal = Decimal("0")
    session_hours: int = 24
    default_admin_user: str = "admin"
    default_admin_password: str = "admin123"
    require_consent: bool = True
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.sv_rate.is_finite() or not Decimal("0") <= self.sv_rate <= Decimal("1"):
            raise ValueError(f"sv_rate must be between 0 and 1, got {self.sv_rate}")
        if not self.other_pension_contributions.is_finite() or self.other_pension_contributions < 0:
            raise ValueError(
                f"other_pension_contributions must not be negative, got {self.other_pension_contributions}"
            )
        if self.session_hours <= 0:
            raise ValueError(f"session_hours must be positive, got {self.session_hours}")


_DEFAULTS = AppConfig()
_cached: Optional[AppConfig] = None


def _config_path() -> Path:
    from ..data.database import _find_project_root
    return _find_project_root() / "config.json"


def get_config() -> AppConfig:
    global _cached
    if _cached is not None:
        return _cached
    path = _config_path()
    if not path.exists():
        _cached = AppConfig()
        return _cached
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        _cached = AppConfig(
            sv_rate=Decimal(str(data.get("sv_rate", _DEFAULTS.sv_rate))),
            other_pension_contributions=Decimal(
                str(data.get("other_pension_contributions", 0))
            ),
            session_hours=int(data.get("session_hours", _DEFAULTS.session_hours)),
            default_admin_user=data.get("default_admin_user", _DEFAULTS.default_admin_user),
            default_admin_password=data.get(
                "default_admin_password", _DEFAULTS.default_admin_password
            ),
            require_consent=bool(data.get("require_consent", True)),
            log_level=data.get("log_level", _DEFAULTS.log_level),
        )
    except (OSError, ValueError, ArithmeticError) as e:
        logger.warning("Could not read %s (%s) — using defaults", path, e)
        _cached = AppConfig()
    return _cached


def save_config(cfg: AppConfig) -> None:
    global _cached
    _cached = cfg
    data = {
        "sv_rate": float(cfg.sv_rate),
        "other_pension_contributions": float(cfg.other_pension_contributions),
        "session_hours": cfg.session_hours,
        "default_admin_user": cfg.default_admin_user,
        "default_admin_password": cfg.default_admin_password,
        "require_consent": cfg.require_consent,
        "log_level": cfg.log_level,
    }
    _config_path().write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def reset_config_cache() -> None:
    global _cached
    _cached = None
