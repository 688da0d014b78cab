from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

from bumpkeeper.core.domain.enums import PassName
from bumpkeeper.core.engine.period_cache import CACHE_POLICIES

SUBMITTER_CHOICES: tuple[str, ...] = ("outbox", "dry_run")


@dataclass(frozen=True)
class BumperConfig:
    db_path: str
    sender: str
    body: str = "fellowship"
    passes: tuple[PassName, ...] = (PassName.MEMBERS, PassName.CYCLE)
    submitter: str = "outbox"
    cache_policy: str = "per_pass"
    max_workers: int = 1
    repeat: int = 1
    interval_seconds: float = 0.0

    def validate(self) -> None:
        if not self.db_path.strip():
            raise ValueError("db_path must be non-empty")
        if not self.sender.strip():
            raise ValueError("sender must be non-empty")
        if not self.passes:
            raise ValueError("at least one pass must be selected")
        if self.submitter not in SUBMITTER_CHOICES:
            raise ValueError(f"submitter must be one of {', '.join(SUBMITTER_CHOICES)}")
        if self.cache_policy not in CACHE_POLICIES:
            raise ValueError(f"cache_policy must be one of {', '.join(CACHE_POLICIES)}")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if self.repeat < 0:
            raise ValueError("repeat must be >= 0 (0 = run forever)")
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")


def _require(payload: dict[str, Any], key: str, expected_type: type) -> Any:
    if key not in payload:
        raise ValueError(f"Missing required field '{key}' in bumper config")
    return _typed(payload, key, expected_type)


def _typed(payload: dict[str, Any], key: str, expected_type: type) -> Any:
    value = payload[key]
    if expected_type is float:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ValueError(f"Field '{key}' must be float")
        return float(value)
    if expected_type is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"Field '{key}' must be int")
        return value
    if not isinstance(value, expected_type):
        raise ValueError(f"Field '{key}' must be {expected_type.__name__}")
    return value


def parse_passes(raw: list[Any] | str) -> tuple[PassName, ...]:
    if isinstance(raw, str):
        raw = [part.strip() for part in raw.split(",") if part.strip()]
    if raw == ["all"]:
        return (PassName.MEMBERS, PassName.CYCLE)
    passes: list[PassName] = []
    for item in raw:
        try:
            name = PassName(item)
        except ValueError:
            raise ValueError(f"Unknown pass: {item}") from None
        if name not in passes:
            passes.append(name)
    return tuple(passes)


def load_bumper_config(path: str | Path) -> BumperConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"Bumper config not found: {config_path}")

    payload = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Bumper config must be a JSON object")

    optional: dict[str, Any] = {}
    for key, expected_type in (
        ("body", str),
        ("submitter", str),
        ("cache_policy", str),
        ("max_workers", int),
        ("repeat", int),
        ("interval_seconds", float),
    ):
        if key in payload:
            optional[key] = _typed(payload, key, expected_type)
    if "passes" in payload:
        optional["passes"] = parse_passes(_typed(payload, "passes", list))

    config = BumperConfig(
        db_path=_require(payload, "db_path", str),
        sender=_require(payload, "sender", str),
        **optional,
    )
    config.validate()
    return config


def apply_overrides(config: BumperConfig, **overrides: Optional[Any]) -> BumperConfig:
    changes = {key: value for key, value in overrides.items() if value is not None}
    updated = replace(config, **changes)
    updated.validate()
    return updated
