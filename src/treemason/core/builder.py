from __future__ import annotations

"""
Structure Builder.

Depth-first walk over the parsed structure that issues one mkdir, and
optionally chown, chmod and placeholder-file creation, per node. Ownership and
mode are set before the contents are created so they inherit the group and
the setgid bit; a mode that takes access away from the owner is applied in
full only after the subtree exists. The walk is
idempotent: existing directories and files are left in place, so running it
twice against the same base directory creates nothing the second time.

Failures are handled per node:
- mkdir failure: recorded as an error, the node's subtree is skipped.
- chmod / chown / placeholder failure: recorded as a warning, walk continues.
"""

import logging
import os
import stat
from typing import Optional, Sequence

from treemason.domain.build_models import BuildReport, NodeIssue
from treemason.domain.tree_models import StructureNode
from treemason.infra.fs import apply_mode, apply_owner, create_placeholder, ensure_directory

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_structure(
        nodes: Sequence[StructureNode],
        base_dir: str,
        *,
        dry_run: bool = False,
) -> BuildReport:
    """
    Materialize the structure under ``base_dir``.

    Args:
        nodes: Top-level structure nodes.
        base_dir: Existing directory the structure is created in.
        dry_run: Log the actions without touching the filesystem.

    Returns:
        BuildReport: Created/existing entries plus per-node issues.
    """
    report = BuildReport()
    for node in nodes:
        _build_node(node, base_dir, report, dry_run, parent_planned=False)
    return report


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _build_node(
        node: StructureNode,
        parent_dir: str,
        report: BuildReport,
        dry_run: bool,
        parent_planned: bool,
) -> None:
    """
    Process one node and recurse into its children.

    ``parent_planned`` is True during a dry run when the parent does not
    exist yet, in which case nothing below it can exist either.
    """
    path = os.path.join(parent_dir, node.name)

    planned = _make_directory(path, report, dry_run, parent_planned)
    if planned is None:
        return
    simulate = dry_run or planned

    # Owner and mode land before the contents so new entries inherit the
    # group and the setgid bit. chown clears setuid/setgid, so it runs first.
    if node.owner:
        _change_owner(path, node.owner, report, simulate)
    final_mode = None
    if node.permissions:
        final_mode = _change_mode(path, node.permissions, report, simulate)

    for file_name in node.default_files:
        _make_placeholder(os.path.join(path, file_name), report, dry_run, planned)

    for child in node.children:
        _build_node(child, path, report, dry_run, parent_planned=planned)

    if final_mode is not None:
        _restore_mode(path, final_mode, report)


def _make_directory(path: str, report: BuildReport, dry_run: bool, parent_planned: bool) -> Optional[bool]:
    """
    Ensure the directory exists.

    Returns:
        Optional[bool]: None when the subtree must be skipped; otherwise
        True if the directory is only planned (dry run) and False if it
        exists on disk.
    """
    if dry_run:
        if not parent_planned and os.path.islink(path):
            _record_error(report, path, "mkdir", "Refusing to follow a symbolic link")
            return None
        if not parent_planned and os.path.isdir(path):
            report.existing_dirs.append(path)
            logger.debug(f"Directory exists: {path}")
            return False
        if not parent_planned and os.path.lexists(path):
            _record_error(report, path, "mkdir", f"Path exists and is not a directory: {path}")
            return None
        report.created_dirs.append(path)
        logger.info(f"Would create directory: {path}")
        return True

    try:
        created = ensure_directory(path)
    except OSError as e:
        _record_error(report, path, "mkdir", _describe(e))
        return None

    if created:
        report.created_dirs.append(path)
        logger.info(f"Created directory: {path}")
    else:
        report.existing_dirs.append(path)
        logger.debug(f"Directory exists: {path}")
    return False


def _change_mode(path: str, spec: str, report: BuildReport, simulate: bool) -> Optional[int]:
    """
    Apply the node mode while keeping the directory writable for its owner.

    Returns:
        Optional[int]: The exact mode to set once the subtree exists, or
        None when the applied mode already is the final one.
    """
    if simulate:
        logger.info(f"Would set permissions {spec} on {path}")
        return None
    try:
        mode = apply_mode(path, spec, keep_owner_access=True)
    except (OSError, ValueError) as e:
        _record_warning(report, path, "chmod", _describe(e))
        return None
    logger.debug(f"Permissions set to {oct(mode)} on {path}")
    return mode if (mode & stat.S_IRWXU) != stat.S_IRWXU else None


def _restore_mode(path: str, mode: int, report: BuildReport) -> None:
    try:
        apply_mode(path, mode)
    except OSError as e:
        _record_warning(report, path, "chmod", _describe(e))


def _change_owner(path: str, spec: str, report: BuildReport, simulate: bool) -> None:
    if simulate:
        logger.info(f"Would set owner {spec} on {path}")
        return
    try:
        apply_owner(path, spec)
    except (OSError, LookupError, ValueError) as e:
        _record_warning(report, path, "chown", _describe(e))
        return
    logger.debug(f"Owner set to {spec} on {path}")


def _make_placeholder(path: str, report: BuildReport, dry_run: bool, dir_planned: bool) -> None:
    if dry_run:
        if not dir_planned and os.path.lexists(path):
            report.existing_files.append(path)
            logger.debug(f"File exists, left untouched: {path}")
        else:
            report.created_files.append(path)
            logger.info(f"Would create file: {path}")
        return

    try:
        created = create_placeholder(path)
    except OSError as e:
        _record_warning(report, path, "touch", _describe(e))
        return

    if created:
        report.created_files.append(path)
        logger.info(f"Created file: {path}")
    else:
        report.existing_files.append(path)
        logger.debug(f"File exists, left untouched: {path}")


def _record_warning(report: BuildReport, path: str, action: str, error: str) -> None:
    report.warnings.append(NodeIssue(path=path, action=action, error=error))
    logger.warning(f"{action} failed on {path}: {error}")


def _record_error(report: BuildReport, path: str, action: str, error: str) -> None:
    report.errors.append(NodeIssue(path=path, action=action, error=error))
    logger.error(f"{action} failed on {path}: {error}. Skipping its subtree.")


def _describe(e: BaseException) -> str:
    if isinstance(e, OSError) and e.strerror:
        return e.strerror
    return str(e)
