from __future__ import annotations

"""
Core orchestration.

Coordinates a complete run:
1. Validates the run configuration.
2. Checks the structure file and the base directory.
3. Loads and parses the structure description.
4. Optionally renders a preview of the structure.
5. Walks the structure and materializes it on disk.
6. Packs the outcome into a BuildResult.
"""

import logging
from typing import Any, Dict, Optional

from treemason.core.builder import build_structure
from treemason.core.parsing.loader import load_structure
from treemason.core.render import render_structure
from treemason.core.validator import (
    check_base_directory,
    check_config_file,
    validate_config,
)
from treemason.domain.build_models import (
    PHASE_BUILD,
    PHASE_VALIDATION,
    BuildResult,
    create_error_result,
    create_success_result,
)
from treemason.domain.exceptions import StructureSyntaxError
from treemason.domain.tree_models import count_nodes, iter_paths

logger = logging.getLogger(__name__)


def run_build(config: Optional[Dict[str, Any]]) -> BuildResult:
    """
    Execute a full build run.

    Validation failures abort before anything is created. Per-node
    failures during the walk never abort the run: chmod, chown and
    placeholder failures are warnings, while mkdir failures mark the
    result as failed after the walk completes.

    Args:
        config: The run configuration (raw or partial).

    Returns:
        BuildResult: Status, created entries, issues and counters.
    """
    # -------------------------------------------------------------------------
    # 1) Config & Path Normalization
    # -------------------------------------------------------------------------
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    # -------------------------------------------------------------------------
    # 2) Pre-flight Checks
    # -------------------------------------------------------------------------
    problem = check_config_file(cfg["config_file"]) or check_base_directory(cfg["base_dir"])
    if problem:
        logger.error(problem)
        return create_error_result(problem, cfg, PHASE_VALIDATION)

    # -------------------------------------------------------------------------
    # 3) Structure Loading
    # -------------------------------------------------------------------------
    try:
        parsed = load_structure(
            cfg["config_file"],
            cfg["fmt"],
            indent_width=cfg["indent_width"],
            strict=cfg["strict"],
        )
    except StructureSyntaxError as e:
        msg = f"Invalid structure: {e}"
        logger.error(msg)
        return create_error_result(msg, cfg, PHASE_VALIDATION)
    except OSError as e:
        msg = f"Cannot read structure file {cfg['config_file']}: {e.strerror or e}"
        logger.error(msg)
        return create_error_result(msg, cfg, PHASE_VALIDATION)

    for warning in parsed.warnings:
        logger.warning(f"Structure Warning: {warning}")

    logger.info(
        f"Loaded {count_nodes(parsed.nodes)} directories from {cfg['config_file']} ({parsed.fmt})."
    )
    for rel_path in iter_paths(parsed.nodes):
        logger.debug(f"Declared: {rel_path}")

    tree_lines = render_structure(parsed.nodes, cfg["base_dir"]) if cfg["print_tree"] else []

    # -------------------------------------------------------------------------
    # 4) Materialization
    # -------------------------------------------------------------------------
    mode = "Simulating" if cfg["dry_run"] else "Building"
    logger.info(f"{mode} structure under {cfg['base_dir']}")

    report = build_structure(parsed.nodes, cfg["base_dir"], dry_run=cfg["dry_run"])

    if not report.ok:
        msg = f"{len(report.errors)} director{'y' if len(report.errors) == 1 else 'ies'} could not be created."
        return create_error_result(msg, cfg, PHASE_BUILD, parsed.fmt, report, tree_lines)

    return create_success_result(cfg, parsed.fmt, report, tree_lines)
