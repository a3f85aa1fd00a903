from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging initialization, merging of
defaults with command-line overrides, the build run and result rendering.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from treemason.core.engine import run_build
from treemason.domain.build_models import PHASE_VALIDATION, BuildResult
from treemason.domain.config import get_default_config
from treemason.infra.logging import LoggingConfig, configure_logging, get_logger, shutdown_logging
from treemason.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_BUILD_FAILED = 1
EXIT_INVALID_INPUT = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 when directories could not be created or the
        run crashed, 2 on invalid input, 130 when interrupted.
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    configure_logging(_logging_config(args), force=True)

    try:
        return _run(args)
    finally:
        shutdown_logging()


def _logging_config(args: Any) -> LoggingConfig:
    rotation: Dict[str, int] = {}
    if args.log_max_bytes is not None:
        rotation["max_bytes"] = args.log_max_bytes
    if args.log_backups is not None:
        rotation["backup_count"] = args.log_backups

    return LoggingConfig(
        level="DEBUG" if args.debug else "INFO",
        console=True,
        log_file=args.log_file,
        **rotation,
    )


def _run(args: Any) -> int:
    # 3. Map and merge command-line overrides
    raw_conf = _merge_config(get_default_config(), cli_args.args_to_overrides(args))

    # 4. Build phase
    try:
        result = run_build(raw_conf)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. The structure may be partially created.")
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Unexpected failure: {e}", exc_info=True)
        return EXIT_BUILD_FAILED

    # 5. Output rendering phase (flush status lines first)
    shutdown_logging()

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    if result.ok:
        return EXIT_OK
    return EXIT_INVALID_INPUT if result.phase == PHASE_VALIDATION else EXIT_BUILD_FAILED

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Only known keys with non-None values are merged.

    Args:
        base: The default configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in base:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: BuildResult) -> None:
    """
    Print the build outcome.

    The success line goes to stdout; failures go to stderr.

    Args:
        result: The build result to render.
    """
    for line in result.tree_lines:
        print(line)

    if not result.ok and result.phase == PHASE_VALIDATION:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    summary = result.summary
    verb = "would be created" if result.dry_run else "created"

    stats = (
        f"{summary.get('dirs_created', 0)} directories {verb}, "
        f"{summary.get('dirs_existing', 0)} already present; "
        f"{summary.get('files_created', 0)} files {verb}, "
        f"{summary.get('files_existing', 0)} already present"
    )

    if not result.ok:
        print(f"ERROR: {result.error} ({stats})", file=sys.stderr)
        for issue in result.errors:
            print(f"  - {issue.action} {issue.path}: {issue.error}", file=sys.stderr)
        return

    label = "DRY RUN" if result.dry_run else "SUCCESS"
    print(f"{label}: Structure from {result.config_file} applied to {result.base_dir}")
    print(f"  {stats}")

    if result.warnings:
        print(f"  {len(result.warnings)} warning(s):")
        for issue in result.warnings:
            print(f"  - {issue.action} {issue.path}: {issue.error}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
