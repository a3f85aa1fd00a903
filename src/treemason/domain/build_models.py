from __future__ import annotations

"""
Build Domain Data Models.

Defines the data structures used to communicate build results between the
engine and the CLI, plus the factory functions that assemble them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PHASE_VALIDATION = "validation"
PHASE_BUILD = "build"

# -----------------------------------------------------------------------------
# ERROR TRACKING MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NodeIssue:
    """
    Failure of a single filesystem action on one node.

    Attributes:
        path: Absolute path the action targeted.
        action: One of 'mkdir', 'chmod', 'chown', 'touch'.
        error: Descriptive error message.
    """
    path: str
    action: str
    error: str


@dataclass
class BuildReport:
    """Mutable accumulator filled in by the builder during the walk."""
    created_dirs: List[str] = field(default_factory=list)
    existing_dirs: List[str] = field(default_factory=list)
    created_files: List[str] = field(default_factory=list)
    existing_files: List[str] = field(default_factory=list)
    warnings: List[NodeIssue] = field(default_factory=list)
    errors: List[NodeIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildResult:
    """
    Unified result object of a complete build run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        phase: Stage that failed ('validation' or 'build'), empty on success.
        config_file: Structure description that was read.
        base_dir: Directory the structure was materialized under.
        fmt: Resolved input format ('text' or 'yaml').
        dry_run: Whether filesystem mutations were simulated.
        created_dirs: Directories created by this run.
        existing_dirs: Declared directories that already existed.
        created_files: Placeholder files created by this run.
        existing_files: Placeholder files left untouched.
        warnings: Non-fatal per-node failures.
        errors: Per-node failures that skipped a subtree.
        tree_lines: Rendered structure, when requested.
        summary: Execution counters.
    """
    ok: bool
    error: str
    phase: str

    config_file: str
    base_dir: str
    fmt: str
    dry_run: bool

    created_dirs: List[str] = field(default_factory=list)
    existing_dirs: List[str] = field(default_factory=list)
    created_files: List[str] = field(default_factory=list)
    existing_files: List[str] = field(default_factory=list)

    warnings: List[NodeIssue] = field(default_factory=list)
    errors: List[NodeIssue] = field(default_factory=list)

    tree_lines: List[str] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        cfg: Dict[str, Any],
        phase: str = PHASE_VALIDATION,
        fmt: str = "",
        report: Optional[BuildReport] = None,
        tree_lines: Optional[List[str]] = None,
) -> BuildResult:
    """
    Create a failed build result instance.

    Args:
        error: Detailed error description.
        cfg: The configuration used during the failed run.
        phase: Stage in which the run failed.
        fmt: Resolved input format, if known.
        report: Partial walk report when the failure happened during the build.
        tree_lines: Rendered structure, if any.

    Returns:
        BuildResult: An immutable error result object.
    """
    report = report or BuildReport()
    return BuildResult(
        ok=False,
        error=error,
        phase=phase,
        config_file=cfg.get("config_file", ""),
        base_dir=cfg.get("base_dir", ""),
        fmt=fmt,
        dry_run=bool(cfg.get("dry_run", False)),
        created_dirs=list(report.created_dirs),
        existing_dirs=list(report.existing_dirs),
        created_files=list(report.created_files),
        existing_files=list(report.existing_files),
        warnings=list(report.warnings),
        errors=list(report.errors),
        tree_lines=tree_lines or [],
        summary=_summarize(report),
    )


def create_success_result(
        cfg: Dict[str, Any],
        fmt: str,
        report: BuildReport,
        tree_lines: Optional[List[str]] = None,
) -> BuildResult:
    """
    Create a successful build result instance.

    Args:
        cfg: Final configuration used during execution.
        fmt: Resolved input format.
        report: Completed walk report.
        tree_lines: Rendered structure, if any.

    Returns:
        BuildResult: An immutable success result object.
    """
    return BuildResult(
        ok=True,
        error="",
        phase="",
        config_file=cfg.get("config_file", ""),
        base_dir=cfg.get("base_dir", ""),
        fmt=fmt,
        dry_run=bool(cfg.get("dry_run", False)),
        created_dirs=list(report.created_dirs),
        existing_dirs=list(report.existing_dirs),
        created_files=list(report.created_files),
        existing_files=list(report.existing_files),
        warnings=list(report.warnings),
        errors=[],
        tree_lines=tree_lines or [],
        summary=_summarize(report),
    )


def _summarize(report: BuildReport) -> Dict[str, Any]:
    return {
        "dirs_created": len(report.created_dirs),
        "dirs_existing": len(report.existing_dirs),
        "files_created": len(report.created_files),
        "files_existing": len(report.existing_files),
        "warnings": len(report.warnings),
        "errors": len(report.errors),
    }
