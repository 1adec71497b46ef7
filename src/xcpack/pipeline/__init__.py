"""
Packaging pipeline for xcpack.

This module provides:
- The strategy chain state machine (PipelineController)
- Exhaustion diagnostics (DiagnosticsReporter)
- The advisory lock around the output path
"""

from .controller import PipelineController
from .diagnostics import DiagnosticsReporter
from .outcomes import (
    STRATEGY_ORDER,
    OutcomeStatus,
    PipelineResult,
    PipelineState,
    StrategyName,
    StrategyOutcome,
)
from .output_lock import OutputLock, OutputLockedError

__all__ = [
    "PipelineController",
    "DiagnosticsReporter",
    "STRATEGY_ORDER",
    "OutcomeStatus",
    "PipelineResult",
    "PipelineState",
    "StrategyName",
    "StrategyOutcome",
    "OutputLock",
    "OutputLockedError",
]
