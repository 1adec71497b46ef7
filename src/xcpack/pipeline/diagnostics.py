"""Exhaustion diagnostics.

Builds the report printed when no packaging strategy produced a bundle.
The report leads with what was searched and what was missing, then gives
remediation hints, any captured toolchain output, and a listing of the
submodule so that an operator can see what it actually contains.

Report generation is pure: the same filesystem and inputs always produce
the same text.
"""

from pathlib import Path
from typing import List, Optional, Sequence

from ..build.build_utils import tail
from ..discovery.path_probe import NamePattern, PathProbe
from .outcomes import StrategyName, StrategyOutcome


class DiagnosticsReporter:
    """Formats the structured failure report."""

    def __init__(
        self,
        bundle_name: str = "ParsecSDK.xcframework",
        header_name: str = "parsec.h",
        listing_depth: int = 4,
        evidence_lines: int = 40,
    ):
        """Initialize diagnostics reporter.

        Args:
            bundle_name: Name of the unified bundle that could not be created
            header_name: Name of the SDK's public header
            listing_depth: Depth of the submodule listing
            evidence_lines: Maximum lines of toolchain output per failed step
        """
        self.bundle_name = bundle_name
        self.header_name = header_name
        self.listing_depth = listing_depth
        self.evidence_lines = evidence_lines

    def report(
        self,
        search_root: Path,
        attempted_strategies: Sequence[StrategyName],
        found_header_path: Optional[Path],
        outcomes: Optional[Sequence[StrategyOutcome]] = None,
        searched_patterns: Optional[Sequence[NamePattern]] = None,
        exhausted: bool = True,
    ) -> str:
        """Produce the diagnostic text.

        Args:
            search_root: Submodule root that was searched
            attempted_strategies: Strategies tried, in order
            found_header_path: Header file location, or None if never found
            outcomes: Per-strategy outcomes (adds details and toolchain evidence)
            searched_patterns: Artifact patterns that were searched for
            exhausted: Whether every strategy failed; False gives a neutral
                heading and omits the remediation hints

        Returns:
            Report text
        """
        outcome_by_name = {outcome.strategy: outcome for outcome in outcomes or []}
        if exhausted:
            heading = f"ERROR: Could not find any usable built framework or library to create {self.bundle_name}."
        else:
            heading = f"Diagnostics for {self.bundle_name}"
        lines = [heading, "", "Strategies attempted:"]
        if not attempted_strategies:
            lines.append("  (none)")
        for index, strategy in enumerate(attempted_strategies, start=1):
            outcome = outcome_by_name.get(strategy)
            if outcome is not None:
                lines.append(f"  {index}. {strategy.value}: {outcome.status.value} - {outcome.detail}")
            else:
                lines.append(f"  {index}. {strategy.value}")

        lines.append("")
        lines.append("Searched:")
        lines.append(f"  root: {search_root}")
        if not search_root.exists():
            lines.append("  (root does not exist)")
        elif not search_root.is_dir():
            lines.append("  (root is not a directory)")
        for pattern in searched_patterns or []:
            lines.append(f"  pattern: {pattern}")

        lines.append("")
        lines.append(f"{self.header_name} location: {found_header_path if found_header_path else 'NOT FOUND'}")

        if exhausted:
            lines.extend(self._hints(found_header_path))

        evidence =self._evidence(outcomes or [])
        if evidence:
            lines.append("")
            lines.append("Toolchain output:")
            lines.extend(evidence)

        lines.append("")
        lines.append(f"Listing of {search_root} (depth {self.listing_depth}):")
        listing = self.listing(search_root)
        lines.extend(listing if listing else ["  (empty)"])

        return "\n".join(lines) + "\n"

    def listing(self, root: Path) -> List[str]:
        """Depth-first listing of root, one indented entry per line."""
        lines: List[str] = []
        if root.is_dir():
            self._list_dir(root, 1, lines)
        return lines

    def _list_dir(self, directory: Path, depth: int, lines: List[str]) -> None:
        for entry in PathProbe.list_children(directory):
            indent = "  " * depth
            if entry.is_symlink():
                lines.append(f"{indent}{entry.name}@")
            elif entry.is_dir():
                lines.append(f"{indent}{entry.name}/")
                if depth < self.listing_depth:
                    self._list_dir(entry, depth + 1, lines)
            else:
                lines.append(f"{indent}{entry.name}")

    def _evidence(self, outcomes: Sequence[StrategyOutcome]) -> List[str]:
        lines: List[str] = []
        for outcome in outcomes:
            for label, output in outcome.evidence:
                if not output.strip():
                    continue
                lines.append(f"  --- {outcome.strategy.value}: {label} ---")
                lines.extend(f"  {line}" for line in tail(output, self.evidence_lines).splitlines())
        return lines

    def _hints(self, found_header_path: Optional[Path]) -> List[str]:
        lines = [
            "",
            "Please either:",
            "  * Build the SDK macOS artifacts in the submodule (Xcode project or build system), or",
            f"  * Replace the submodule with a prebuilt {self.bundle_name} containing macos or maccatalyst slices.",
        ]
        if found_header_path is None:
            lines.append(f"  * If you only have a library, add {self.header_name} under sdk/ or include/.")
        return lines
