"""
Threshold loader (``wip_config.loader``).

Responsibility
--------------
Loads a YAML threshold file and parses it into the frozen
``wip_config.schema`` dataclasses. Runtime callers go through
``wip_config.get_active_thresholds()``; this module is the parsing layer
underneath it.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Sections or keys absent from the file keep their schema defaults.
* Unknown keys and invalid values raise ``ThresholdConfigError``; nothing
  is silently ignored.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  effective configuration.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Bad value / unknown key  -> ``ThresholdConfigError``.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from wip_config.schema import (
    AnalyzerThresholds,
    AttentionThresholds,
    RiskThresholds,
    ScheduleThresholds,
    SnapshotThresholds,
)
from wip_kernel.exceptions import ThresholdConfigError

_SECTIONS: dict[str, type] = {
    "risk": RiskThresholds,
    "schedule": ScheduleThresholds,
    "snapshot": SnapshotThresholds,
    "attention": AttentionThresholds,
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _coerce(key: str, value: Any, default: Any) -> Any:
    if isinstance(value, bool):
        raise ThresholdConfigError(key, value, "booleans are not thresholds")
    if isinstance(default, int):
        if not isinstance(value, int):
            raise ThresholdConfigError(key, value, "expected an integer")
        result: Any = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            raise ThresholdConfigError(key, value, "expected a number") from None
        if not result.is_finite():
            raise ThresholdConfigError(key, value, "must be finite")
    if result < 0:
        raise ThresholdConfigError(key, value, "must be non-negative")
    return result


def parse_section(name: str, data: dict[str, Any] | None) -> Any:
    """Parse one threshold section, keeping defaults for absent keys."""
    section_cls = _SECTIONS[name]
    defaults = section_cls()
    if not data:
        return defaults
    if not isinstance(data, dict):
        raise ThresholdConfigError(name, data, "section must be a mapping")

    known = {f.name for f in dataclasses.fields(section_cls)}
    values: dict[str, Any] = {}
    for key, raw in data.items():
        if key not in known:
            raise ThresholdConfigError(f"{name}.{key}", raw, "unknown threshold")
        values[key] = _coerce(f"{name}.{key}", raw, getattr(defaults, key))
    return dataclasses.replace(defaults, **values)


def _validate(thresholds: AnalyzerThresholds) -> None:
    risk = thresholds.risk
    if risk.underbilling_medium_ratio > risk.underbilling_high_ratio:
        raise ThresholdConfigError(
            "risk.underbilling_medium_ratio",
            risk.underbilling_medium_ratio,
            "must not exceed risk.underbilling_high_ratio",
        )
    attention = thresholds.attention
    pairs = (
        ("underbilling_percent", "underbilling_percent_high"),
        ("margin_fade_points", "margin_fade_points_high"),
        ("schedule_drift_weeks", "schedule_drift_weeks_high"),
    )
    for low, high in pairs:
        if getattr(attention, low) > getattr(attention, high):
            raise ThresholdConfigError(
                f"attention.{low}", getattr(attention, low), f"must not exceed attention.{high}"
            )


def parse_thresholds(data: dict[str, Any]) -> AnalyzerThresholds:
    """
    Parse a full threshold document.

    Postconditions:
        - Returns an ``AnalyzerThresholds`` whose ``checksum`` identifies
          the effective values.
    Raises:
        ThresholdConfigError: on unknown sections/keys or invalid values.
    """
    for name in data:
        if name not in _SECTIONS:
            raise ThresholdConfigError(name, data[name], "unknown section")

    thresholds = AnalyzerThresholds(
        **{name: parse_section(name, data.get(name)) for name in _SECTIONS}
    )
    _validate(thresholds)
    return dataclasses.replace(thresholds, checksum=compute_checksum(thresholds))


def load_thresholds(path: Path) -> AnalyzerThresholds:
    """Load and parse a threshold YAML file."""
    return parse_thresholds(load_yaml_file(path))


def _canonical_value(value: Any) -> str:
    # 0.1 and 0.10 are the same threshold
    if isinstance(value, Decimal):
        return str(value.normalize())
    return str(value)


def compute_checksum(thresholds: AnalyzerThresholds) -> str:
    """
    Compute SHA-256 checksum of the canonical JSON form of the thresholds.

    The ``checksum`` field itself is excluded, so identical values always
    produce identical checksums.
    """
    data = dataclasses.asdict(thresholds)
    data.pop("checksum", None)
    canonical = json.dumps(data, sort_keys=True, default=_canonical_value)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
