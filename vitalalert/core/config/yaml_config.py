from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from vitalalert.domain.models import (
    DEFAULT_VITAL_LIMITS,
    EMERGENCY_TONE,
    WARNING_TONE,
    Profile,
    ToneProfile,
    VitalLimits,
    VitalType,
    Waveform,
)
from vitalalert.notification.escalation import DEFAULT_CONTACT


@dataclass(frozen=True)
class WebhookConfigData:
    """Webhook escalation channel configuration (URL + auth)."""
    url: str
    auth_header: Optional[str] = None
    timeout_s: float = 3.0
    verify_tls: bool = True


@dataclass(frozen=True)
class EscalationConfig:
    """Escalation notifier and dispatch channel settings."""
    default_contact: str = DEFAULT_CONTACT
    recent_count: int = 3
    deep_link_base: str = "https://wa.me"
    open_deep_link: bool = True
    webhook: Optional[WebhookConfigData] = None


@dataclass(frozen=True)
class ToneConfig:
    """Acoustic signature per alarming severity."""
    warning: ToneProfile = WARNING_TONE
    emergency: ToneProfile = EMERGENCY_TONE


@dataclass(frozen=True)
class AppConfig:
    """
    Root application configuration loaded from YAML.

    This is the single source of truth for runtime-tunable values (limits,
    tones, escalation) so the app can be configured without rebuilding.
    """
    profile: Profile
    vitals: List[VitalLimits] = field(default_factory=lambda: list(DEFAULT_VITAL_LIMITS))
    tones: ToneConfig = field(default_factory=ToneConfig)
    escalation: EscalationConfig = field(default_factory=EscalationConfig)
    log_level: str = "INFO"


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("config.yaml must contain a YAML mapping at the root")
    return data


def _resolve_default_config_path() -> Optional[Path]:
    """
    Resolve config.yaml location.

    Priority:
    1) VITALALERT_CONFIG env var if provided
    2) config.yaml next to the executable
    3) ./config.yaml in current working directory

    Returns None when no candidate exists (built-in defaults are used).
    """
    env = os.getenv("VITALALERT_CONFIG")
    if env:
        return Path(env).expanduser().resolve()

    exe_dir = Path(sys.executable).resolve().parent
    candidate = exe_dir / "config.yaml"
    if candidate.exists():
        return candidate

    cwd_candidate = Path("config.yaml").resolve()
    if cwd_candidate.exists():
        return cwd_candidate
    return None


def _opt_float(raw: Dict[str, Any], key: str) -> Optional[float]:
    v = raw.get(key)
    return None if v is None else float(v)


def _parse_vitals(raw: Dict[str, Any]) -> List[VitalLimits]:
    vitals: List[VitalLimits] = []
    for key, item in raw.items():
        try:
            vital_type = VitalType(str(key).upper())
        except ValueError:
            raise ValueError(f"Unknown vital type in config: {key}") from None
        item = item or {}
        lim = VitalLimits(
            vital_type=vital_type,
            low_warning=_opt_float(item, "low_warning"),
            high_warning=_opt_float(item, "high_warning"),
            low_emergency=_opt_float(item, "low_emergency"),
            high_emergency=_opt_float(item, "high_emergency"),
            emergency_inclusive=bool(item.get("emergency_inclusive", True)),
        )
        lim.validate()
        vitals.append(lim)
    return vitals


def _parse_tone(raw: Dict[str, Any], default: ToneProfile) -> ToneProfile:
    tone = ToneProfile(
        waveform=Waveform(str(raw.get("waveform", default.waveform.value)).lower()),
        frequency_hz=float(raw.get("frequency_hz", default.frequency_hz)),
        period_ms=int(raw.get("period_ms", default.period_ms)),
        duration_ms=int(raw.get("duration_ms", default.duration_ms)),
        gain=float(raw.get("gain", default.gain)),
    )
    if tone.frequency_hz <= 0 or tone.period_ms <= 0 or tone.duration_ms <= 0:
        raise ValueError("tone frequency, period and duration must be positive")
    if tone.duration_ms > tone.period_ms:
        raise ValueError("tone duration must not exceed its repetition period")
    if not 0.0 <= tone.gain <= 1.0:
        raise ValueError("tone gain must be within [0, 1]")
    return tone


def _parse_tones(raw: Dict[str, Any]) -> ToneConfig:
    tones = ToneConfig(
        warning=_parse_tone(raw.get("warning") or {}, WARNING_TONE),
        emergency=_parse_tone(raw.get("emergency") or {}, EMERGENCY_TONE),
    )
    # Emergency must stay perceptually distinct: faster and higher pitched.
    if tones.emergency.period_ms >= tones.warning.period_ms:
        raise ValueError("emergency tone period must be shorter than the warning period")
    if tones.emergency.frequency_hz <= tones.warning.frequency_hz:
        raise ValueError("emergency tone frequency must be higher than the warning frequency")
    return tones


def _parse_escalation(raw: Dict[str, Any]) -> EscalationConfig:
    webhook = None
    w = raw.get("webhook")
    if w:
        webhook = WebhookConfigData(
            url=str(w["url"]),
            auth_header=w.get("auth_header"),
            timeout_s=float(w.get("timeout_s", 3.0)),
            verify_tls=bool(w.get("verify_tls", True)),
        )

    default_contact = str(raw.get("default_contact") or "").strip()
    if "default_contact" in raw and not default_contact:
        raise ValueError("escalation.default_contact must not be empty")

    recent_count = int(raw.get("recent_count", 3))
    if recent_count < 1:
        raise ValueError("escalation.recent_count must be >= 1")

    return EscalationConfig(
        default_contact=default_contact or DEFAULT_CONTACT,
        recent_count=recent_count,
        deep_link_base=str(raw.get("deep_link_base", "https://wa.me")),
        open_deep_link=bool(raw.get("open_deep_link", True)),
        webhook=webhook,
    )


def parse_app_config(raw: Dict[str, Any]) -> AppConfig:
    """
    Convert a raw YAML mapping into typed config objects.

    Raises
    ------
    ValueError
        If required fields are missing or invalid.
    """
    # ---- profile ----
    p = raw.get("profile") or {}
    contact = p.get("contact")
    profile = Profile(
        name=str(p.get("name", "Patient")),
        display_name=p.get("display_name"),
        contact=None if contact in (None, "") else str(contact),
    )

    # ---- vitals ----
    vitals_raw = raw.get("vitals")
    vitals = list(DEFAULT_VITAL_LIMITS) if vitals_raw is None else _parse_vitals(vitals_raw)

    # ---- tones ----
    tones = _parse_tones(raw.get("tones") or {})

    # ---- escalation ----
    escalation = _parse_escalation(raw.get("escalation") or {})

    # ---- logging ----
    log_level = str((raw.get("logging") or {}).get("level", "INFO")).upper()

    return AppConfig(
        profile=profile,
        vitals=vitals,
        tones=tones,
        escalation=escalation,
        log_level=log_level,
    )


def load_app_config(path: Optional[str] = None) -> AppConfig:
    """
    Load application configuration from YAML.

    Parameters
    ----------
    path
        Explicit path to config.yaml. If None, uses default resolution and
        falls back to built-in defaults when no file is found.

    Returns
    -------
    AppConfig
        Parsed and validated configuration.

    Raises
    ------
    FileNotFoundError
        If an explicitly requested config file does not exist.
    ValueError
        If required fields are missing or invalid.
    """
    if path:
        cfg_path: Optional[Path] = Path(path).expanduser().resolve()
    else:
        cfg_path = _resolve_default_config_path()

    if cfg_path is None:
        return parse_app_config({})
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config not found: {cfg_path}")

    return parse_app_config(_read_yaml(cfg_path))
