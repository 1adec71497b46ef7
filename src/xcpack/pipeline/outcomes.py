"""Pipeline states and per-strategy outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from ..build.platform_builder import BuildOutput

EXIT_SUCCESS = 0
EXIT_EXHAUSTED = 2


class PipelineState(Enum):
    CHECK_EXISTING = "check-existing"
    TRY_BUILD_FROM_SOURCE = "try-build-from-source"
    TRY_WRAP_PREBUILT_BUNDLE = "try-wrap-prebuilt-bundle"
    TRY_WRAP_RAW_LIBRARY = "try-wrap-raw-library"
    EXHAUSTED = "exhausted"
    DONE = "done"


class StrategyName(Enum):
    BUILD_FROM_SOURCE = "build-from-source"
    WRAP_PREBUILT_BUNDLE = "wrap-prebuilt-bundle"
    WRAP_RAW_LIBRARY = "wrap-raw-library"


STRATEGY_ORDER = [
    StrategyName.BUILD_FROM_SOURCE,
    StrategyName.WRAP_PREBUILT_BUNDLE,
    StrategyName.WRAP_RAW_LIBRARY,
]


class OutcomeStatus(Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StrategyOutcome:
    """Result of trying one strategy.

    Attributes:
        strategy: Which strategy ran
        status: succeeded, skipped (inputs not found) or failed (tool rejected them)
        detail: Human-readable explanation
        bundle_path: Unified bundle path on success
        evidence: (label, captured toolchain output) pairs from failed steps
    """

    strategy: StrategyName
    status: OutcomeStatus
    detail: str
    bundle_path: Optional[Path] = None
    evidence: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCEEDED


@dataclass
class PipelineResult:
    """Terminal result of a pipeline run."""

    success: bool
    state: PipelineState
    bundle_path: Optional[Path]
    outcomes: List[StrategyOutcome]
    message: str
    build_output: Optional[BuildOutput] = None
    diagnostics: Optional[str] = None
    skipped_existing: bool = False
    build_time: float = 0.0

    @property
    def exit_code(self) -> int:
        return EXIT_SUCCESS if self.success else EXIT_EXHAUSTED

    @property
    def attempted_strategies(self) -> List[StrategyName]:
        return [outcome.strategy for outcome in self.outcomes]
