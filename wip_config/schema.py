"""
Analyzer threshold schema.

Frozen dataclasses holding every tunable cut-off the engines use. The
defaults here mirror ``defaults.yaml``; engines accept an
``AnalyzerThresholds`` argument and fall back to ``DEFAULT_THRESHOLDS``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class RiskThresholds:
    """Smart-risk analyzer cut-offs."""

    underbilling_high_ratio: Decimal = Decimal("0.10")  # underbilled by >10% of contract
    underbilling_medium_ratio: Decimal = Decimal("0.05")
    drift_noise_ratio: Decimal = Decimal("0.10")  # time% - cost% below this is noise
    margin_fade_points: Decimal = Decimal("2")


@dataclass(frozen=True)
class ScheduleThresholds:
    """Severity cut-offs for schedule warnings, in days."""

    demobilization_critical_days: int = 14
    behind_target_critical_days: int = 30


@dataclass(frozen=True)
class SnapshotThresholds:
    """Snapshot billing-position band and margin health factor."""

    billing_position_band: Decimal = Decimal("100")
    at_risk_margin_factor: Decimal = Decimal("0.8")


@dataclass(frozen=True)
class AttentionThresholds:
    """Needs-attention triage cut-offs (medium / high)."""

    underbilling_percent: Decimal = Decimal("50")
    underbilling_percent_high: Decimal = Decimal("75")
    margin_fade_points: Decimal = Decimal("10")
    margin_fade_points_high: Decimal = Decimal("20")
    schedule_drift_weeks: int = 2
    schedule_drift_weeks_high: int = 4


@dataclass(frozen=True)
class AnalyzerThresholds:
    """Complete threshold set passed into the engines."""

    risk: RiskThresholds = field(default_factory=RiskThresholds)
    schedule: ScheduleThresholds = field(default_factory=ScheduleThresholds)
    snapshot: SnapshotThresholds = field(default_factory=SnapshotThresholds)
    attention: AttentionThresholds = field(default_factory=AttentionThresholds)
    checksum: str | None = None


DEFAULT_THRESHOLDS = AnalyzerThresholds()
