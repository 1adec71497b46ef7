"""
Packaging pipeline orchestration.

This module decides how the unified bundle gets produced from whatever
the SDK submodule happens to contain, trying strategies from the most to
the least authoritative:

    CHECK_EXISTING            bundle already present -> DONE (no side effects)
    TRY_BUILD_FROM_SOURCE     build every variant from the Xcode project, merge
    TRY_WRAP_PREBUILT_BUNDLE  wrap a prebuilt .framework
    TRY_WRAP_RAW_LIBRARY      wrap a .dylib/.so/.a together with its headers
    EXHAUSTED                 nothing worked -> diagnostics, non-zero exit

Every strategy failure is recovered here and recorded as a StrategyOutcome;
only exhaustion is surfaced to the caller.

Example usage:
    config = PackagingConfig.for_project(Path("."))
    result = PipelineController(config).run()
    if not result.success:
        print(result.diagnostics)
"""

import contextlib
import logging
import time
import traceback
from typing import Callable, Dict, List, Optional

from ..build.build_utils import is_non_empty_dir, safe_rmtree
from ..build.bundle_wrapper import BundleWrapper, WrapFailure
from ..build.command_runner import CommandRunner, SubprocessRunner
from ..build.platform_builder import BuildOutput, PlatformBuilder
from ..config import PackagingConfig
from ..discovery import CandidateLocator, EntryKind, HeaderResolver, NamePattern
from .diagnostics import DiagnosticsReporter
from .outcomes import (
    OutcomeStatus,
    PipelineResult,
    PipelineState,
    StrategyName,
    StrategyOutcome,
)
from .output_lock import OutputLock

NEXT_STATE = {
    PipelineState.TRY_BUILD_FROM_SOURCE: PipelineState.TRY_WRAP_PREBUILT_BUNDLE,
    PipelineState.TRY_WRAP_PREBUILT_BUNDLE: PipelineState.TRY_WRAP_RAW_LIBRARY,
    PipelineState.TRY_WRAP_RAW_LIBRARY: PipelineState.EXHAUSTED,
}

STATE_STRATEGY = {
    PipelineState.TRY_BUILD_FROM_SOURCE: StrategyName.BUILD_FROM_SOURCE,
    PipelineState.TRY_WRAP_PREBUILT_BUNDLE: StrategyName.WRAP_PREBUILT_BUNDLE,
    PipelineState.TRY_WRAP_RAW_LIBRARY: StrategyName.WRAP_RAW_LIBRARY,
}


class PipelineController:
    """Runs the packaging strategy chain for one SDK submodule."""

    def __init__(
        self,
        config: PackagingConfig,
        runner: Optional[CommandRunner] = None,
        use_lock: bool = True,
    ):
        """
        Initialize pipeline controller.

        Args:
            config: Packaging configuration
            runner: Command runner for xcodebuild (defaults to SubprocessRunner)
            use_lock: Hold an advisory lock on the output path while writing
        """
        self.config = config
        self.runner = runner or SubprocessRunner()
        self.use_lock = use_lock

        self.locator = CandidateLocator(
            config.sdk_name,
            project_depth=config.project_search_depth,
            artifact_depth=config.artifact_search_depth,
        )
        self.header_resolver = HeaderResolver(
            header_name=config.header_name,
            search_depth=config.header_search_depth,
            conventional_dirs=config.header_dirs,
        )
        self.builder = PlatformBuilder(
            config.sdk_name, scheme=config.scheme, runner=self.runner, xcodebuild=config.xcodebuild
        )
        self.wrapper = BundleWrapper(config.output_path, runner=self.runner, xcodebuild=config.xcodebuild)
        self.reporter = DiagnosticsReporter(
            bundle_name=config.output_path.name,
            header_name=config.header_name,
            listing_depth=config.listing_depth,
        )

        self._outcomes: List[StrategyOutcome] = []
        self._build_output: Optional[BuildOutput] = None
        self._handlers: Dict[PipelineState, Callable[[], StrategyOutcome]] = {
            PipelineState.TRY_BUILD_FROM_SOURCE: self._try_build_from_source,
            PipelineState.TRY_WRAP_PREBUILT_BUNDLE: self._try_wrap_prebuilt_bundle,
            PipelineState.TRY_WRAP_RAW_LIBRARY: self._try_wrap_raw_library,
        }

    def run(self, force: bool = False) -> PipelineResult:
        """
        Produce the unified bundle.

        Args:
            force: Discard an existing bundle and run the strategy chain anyway

        Returns:
            PipelineResult; success is False only when every strategy was exhausted

        Raises:
            OutputLockedError: If another live process holds the output lock
        """
        start_time = time.time()
        self._outcomes = []
        self._build_output = None
        root = self.config.submodule_root

        logging.info(f"Submodule root: {root}")
        logging.info(f"Checking for existing {self.config.output_path}...")
        state = self._check_existing(force)
        if state == PipelineState.DONE:
            return self._already_present(start_time)

        with self._output_lock():
            # Another run may have finished while we waited for the lock
            state = self._check_existing(force)
            if state == PipelineState.DONE:
                return self._already_present(start_time)

            if force:
                logging.info(f"Removing existing {self.config.output_path} (forced rebuild)")
                safe_rmtree(self.config.output_path)

            while state not in (PipelineState.DONE, PipelineState.EXHAUSTED):
                state = self._step(state)

        if state == PipelineState.DONE:
            outcome = self._outcomes[-1]
            return PipelineResult(
                success=True,
                state=state,
                bundle_path=outcome.bundle_path,
                outcomes=list(self._outcomes),
                message=f"Created {outcome.bundle_path} via {outcome.strategy.value}",
                build_output=self._build_output,
                build_time=time.time() - start_time,
            )

        diagnostics = self.diagnose(self._outcomes)
        logging.error(f"Could not create {self.config.output_path.name}: all strategies exhausted")
        return PipelineResult(
            success=False,
            state=state,
            bundle_path=None,
            outcomes=list(self._outcomes),
            message=f"No usable framework, project or library found under {root}",
            build_output=self._build_output,
            diagnostics=diagnostics,
            build_time=time.time() - start_time,
        )

    def _check_existing(self, force: bool) -> PipelineState:
        if not force and is_non_empty_dir(self.config.output_path):
            return PipelineState.DONE
        return PipelineState.TRY_BUILD_FROM_SOURCE

    def _already_present(self, start_time: float) -> PipelineResult:
        logging.info(f"{self.config.output_path} already exists; skipping creation.")
        return PipelineResult(
            success=True,
            state=PipelineState.DONE,
            bundle_path=self.config.output_path,
            outcomes=[],
            message=f"{self.config.output_path.name} already exists",
            skipped_existing=True,
            build_time=time.time() - start_time,
        )

    def _output_lock(self):
        if not self.use_lock:
            return contextlib.nullcontext()
        return OutputLock(self.config.lock_path)

    def _step(self, state: PipelineState) -> PipelineState:
        strategy = STATE_STRATEGY[state]
        try:
            outcome = self._handlers[state]()
        except KeyboardInterrupt:
            logging.warning(f"{strategy.value} interrupted")
            raise
        except Exception as e:
            logging.warning(f"{strategy.value} raised {type(e).__name__}: {e}")
            outcome = StrategyOutcome(
                strategy=strategy,
                status=OutcomeStatus.FAILED,
                detail=f"unexpected error: {type(e).__name__}: {e}",
                evidence=[("traceback", traceback.format_exc())],
            )

        self._outcomes.append(outcome)
        if outcome.succeeded:
            return PipelineState.DONE

        logging.info(f"{strategy.value} {outcome.status.value}: {outcome.detail}")
        return NEXT_STATE[state]

    def _try_build_from_source(self) -> StrategyOutcome:
        strategy = StrategyName.BUILD_FROM_SOURCE
        root = self.config.submodule_root

        project = self.locator.find_buildable_project(root)
        if project is None:
            return StrategyOutcome(
                strategy, OutcomeStatus.SKIPPED, f"no {self.config.sdk_name}.xcodeproj found under {root}"
            )

        logging.info(f"Found {project.path.name} inside submodule; attempting to build frameworks...")
        build_dir = self.config.build_dir
        safe_rmtree(build_dir)
        safe_rmtree(self.config.output_path)
        build_dir.mkdir(parents=True, exist_ok=True)

        build_output = self.builder.build_all(project.path, self.config.variants, build_dir)
        self._build_output = build_output
        evidence = [(f"{variant.label} build", failure.output) for variant, failure in build_output.failures.items()]

        if not build_output.frameworks:
            listing = "\n".join(self.reporter.listing(build_dir)) or "(empty)"
            evidence.append(("build directory listing", listing))
            failed = ", ".join(variant.label for variant in build_output.failures)
            return StrategyOutcome(
                strategy, OutcomeStatus.FAILED, f"no variant built successfully (failed: {failed})", evidence=evidence
            )

        built = ", ".join(variant.label for variant in build_output.frameworks)
        try:
            bundle = self.wrapper.from_built_variants(build_output.succeeded)
        except WrapFailure as e:
            evidence.append(("create-xcframework", e.output))
            return StrategyOutcome(
                strategy, OutcomeStatus.FAILED, f"built {built} but merge failed: {e}", evidence=evidence
            )

        detail = f"built {built}"
        if build_output.failures:
            detail += f" (skipped failed: {', '.join(v.label for v in build_output.failures)})"
        return StrategyOutcome(strategy, OutcomeStatus.SUCCEEDED, detail, bundle_path=bundle, evidence=evidence)

    def _try_wrap_prebuilt_bundle(self) -> StrategyOutcome:
        strategy = StrategyName.WRAP_PREBUILT_BUNDLE
        root = self.config.submodule_root

        candidate = self.locator.find_prebuilt_bundle(root)
        if candidate is None:
            return StrategyOutcome(strategy, OutcomeStatus.SKIPPED, f"no prebuilt .framework found under {root}")

        logging.info(f"Found framework at: {candidate.path}")
        try:
            bundle = self.wrapper.from_single_bundle(candidate.path)
        except WrapFailure as e:
            return StrategyOutcome(
                strategy,
                OutcomeStatus.FAILED,
                f"could not wrap {candidate.path} (binary may be missing or header layout unexpected): {e}",
                evidence=[("create-xcframework", e.output)],
            )

        return StrategyOutcome(strategy, OutcomeStatus.SUCCEEDED, f"wrapped {candidate.path}", bundle_path=bundle)

    def _try_wrap_raw_library(self) -> StrategyOutcome:
        strategy = StrategyName.WRAP_RAW_LIBRARY
        root = self.config.submodule_root

        library = self.locator.find_raw_library(root)
        if library is None:
            return StrategyOutcome(strategy, OutcomeStatus.SKIPPED, f"no .dylib, .so or .a library found under {root}")

        logging.info(f"Found library at: {library.path}")
        header_dir = self.header_resolver.resolve_headers(root)
        if header_dir is None:
            return StrategyOutcome(
                strategy,
                OutcomeStatus.SKIPPED,
                f"found {library.path} but could not locate headers ({self.config.header_name})",
            )

        logging.info(f"Using headers found at: {header_dir}")
        try:
            bundle = self.wrapper.from_library_and_headers(library.path, header_dir)
        except WrapFailure as e:
            return StrategyOutcome(
                strategy,
                OutcomeStatus.FAILED,
                f"could not wrap {library.path} with headers from {header_dir}: {e}",
                evidence=[("create-xcframework", e.output)],
            )

        return StrategyOutcome(
            strategy, OutcomeStatus.SUCCEEDED, f"wrapped {library.path} with headers from {header_dir}", bundle_path=bundle
        )

    def searched_patterns(self) -> List[NamePattern]:
        """Every artifact pattern the strategy chain looks for."""
        return (
            self.locator.project_patterns
            + self.locator.bundle_patterns
            + self.locator.library_patterns
            + [NamePattern(self.config.header_name, EntryKind.FILE)]
        )

    def diagnose(self, outcomes: Optional[List[StrategyOutcome]] = None, exhausted: bool = True) -> str:
        """Build the diagnostic report for the submodule without building anything.

        Args:
            outcomes: Strategy outcomes of a finished run, if any
            exhausted: False for an on-demand report (neutral heading, no hints)
        """
        root = self.config.submodule_root
        outcomes = outcomes or []
        attempted = [outcome.strategy for outcome in outcomes]
        header = self.header_resolver.locate_header_file(root, self.config.diagnostics_header_depth)
        return self.reporter.report(
            root, attempted, header, outcomes, self.searched_patterns(), exhausted=exhausted
        )
