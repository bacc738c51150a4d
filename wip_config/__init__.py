"""
wip_config -- single public entrypoint for analyzer thresholds.

Responsibility:
    Provides ``get_active_thresholds()``, the one way runtime code obtains
    the tunable cut-offs (underbilling bands, severity day counts, margin
    fade points, snapshot billing band, attention-queue limits). Engines
    never read files themselves; they receive an ``AnalyzerThresholds``.

Audit relevance:
    Every ``get_active_thresholds()`` call emits a ``WIP_CONFIG_TRACE`` log
    entry with the source path and checksum, tying each calculation run to
    the exact thresholds that governed it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from wip_config.loader import compute_checksum, load_thresholds, parse_thresholds
from wip_config.schema import (
    DEFAULT_THRESHOLDS,
    AnalyzerThresholds,
    AttentionThresholds,
    RiskThresholds,
    ScheduleThresholds,
    SnapshotThresholds,
)

_logger = logging.getLogger("wip_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_thresholds(config_path: Path | None = None) -> AnalyzerThresholds:
    """
    Load the analyzer thresholds.

    Args:
        config_path: Override YAML file. Defaults to the packaged
            ``defaults.yaml``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ThresholdConfigError: If a value is invalid.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    thresholds = load_thresholds(path)

    _logger.info(
        "WIP_CONFIG_TRACE",
        extra={
            "trace_type": "WIP_CONFIG_TRACE",
            "config_path": str(path),
            "checksum": thresholds.checksum,
        },
    )
    return thresholds


__all__ = [
    "AnalyzerThresholds",
    "AttentionThresholds",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_THRESHOLDS",
    "RiskThresholds",
    "ScheduleThresholds",
    "SnapshotThresholds",
    "compute_checksum",
    "get_active_thresholds",
    "load_thresholds",
    "parse_thresholds",
]
