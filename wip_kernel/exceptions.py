"""
Typed exception hierarchy for the WIP calculation kernel.

Every error has a typed class (catch by type, not by message), a
machine-readable ``code`` class attribute, and carries its context as
attributes rather than only inside the message string.

    WipKernelError (base)
    |
    +-- JobRecordError
    |   +-- MissingJobFieldError
    |   +-- InvalidJobFieldError
    |
    +-- UnsupportedJobTypeError
    |
    +-- ThresholdConfigError
    |
    +-- SnapshotError
        +-- SnapshotPersistenceError

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Record          | MISSING_JOB_FIELD           | Required breakdown/field absent
                | INVALID_JOB_FIELD           | Value not numeric, finite or parseable
----------------|-----------------------------|-----------------------------------------
Job type        | UNSUPPORTED_JOB_TYPE        | Unknown jobType or revenue basis
----------------|-----------------------------|-----------------------------------------
Config          | THRESHOLD_CONFIG_INVALID    | Threshold YAML has a bad value
----------------|-----------------------------|-----------------------------------------
Snapshot        | SNAPSHOT_PERSISTENCE_FAILED | Sink rejected a snapshot batch

Calculators themselves never raise for well-formed numeric input; the
errors above are raised at the boundaries (record parsing, configuration,
persistence).
"""


class WipKernelError(Exception):
    """Base exception for all WIP kernel errors."""

    code: str = "WIP_KERNEL_ERROR"


# Record parsing


class JobRecordError(WipKernelError):
    """Base exception for malformed job or change-order records."""

    code: str = "JOB_RECORD_ERROR"


class MissingJobFieldError(JobRecordError):
    """A required field is absent from a job or change-order record."""

    code: str = "MISSING_JOB_FIELD"

    def __init__(self, field_name: str, record_key: str | None = None):
        self.field_name = field_name
        self.record_key = record_key
        super().__init__(f"Missing required field: {field_name}")


class InvalidJobFieldError(JobRecordError):
    """A field is present but its value cannot be used."""

    code: str = "INVALID_JOB_FIELD"

    def __init__(self, field_name: str, value: object, reason: str):
        self.field_name = field_name
        self.value = repr(value)
        self.reason = reason
        super().__init__(f"Invalid value for {field_name}: {value!r} ({reason})")


# Job type


class UnsupportedJobTypeError(WipKernelError):
    """Job type (or resolved revenue basis) is not one the engines handle."""

    code: str = "UNSUPPORTED_JOB_TYPE"

    def __init__(self, job_type: object):
        self.job_type = repr(job_type)
        super().__init__(f"Unsupported job type: {job_type!r}")


# Configuration


class ThresholdConfigError(WipKernelError):
    """Analyzer threshold configuration contains an invalid value."""

    code: str = "THRESHOLD_CONFIG_INVALID"

    def __init__(self, key: str, value: object, reason: str):
        self.key = key
        self.value = repr(value)
        self.reason = reason
        super().__init__(f"Invalid threshold {key}={value!r}: {reason}")


# Snapshots


class SnapshotError(WipKernelError):
    """Base exception for snapshot run errors."""

    code: str = "SNAPSHOT_ERROR"


class SnapshotPersistenceError(SnapshotError):
    """The snapshot sink failed to persist a batch of snapshots."""

    code: str = "SNAPSHOT_PERSISTENCE_FAILED"

    def __init__(self, snapshot_count: int, reason: str):
        self.snapshot_count = snapshot_count
        self.reason = reason
        super().__init__(f"Failed to persist {snapshot_count} snapshot(s): {reason}")
