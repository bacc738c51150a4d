"""
WIP Kernel

Foundation layer for the WIP (work-in-progress) job financial engine:
- Immutable job / change-order value objects (Decimal only)
- Plain-record parsing with TBD-aware dates
- Injectable clock
- Typed exceptions with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
