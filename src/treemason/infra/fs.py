from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Thin wrappers over 'os', 'stat' and 'shutil' for the operations the builder
issues per node: directory creation, placeholder files, mode changes and
ownership changes. Also hosts path normalization and name validation helpers.
"""

import errno
import os
import re
import shutil
import stat
from typing import Optional, Tuple, Union

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

OCTAL_MODE_RE = re.compile(r"^0?[0-7]{3,4}$")
SYMBOLIC_CLAUSE_RE = re.compile(r"^([ugoa]*)([-+=])([rwxXst]*|[ugo])$")

_WHO_BITS = {
    "u": stat.S_IRWXU | stat.S_ISUID,
    "g": stat.S_IRWXG | stat.S_ISGID,
    "o": stat.S_IRWXO | stat.S_ISVTX,
}
_PERM_BITS = {
    ("u", "r"): stat.S_IRUSR, ("u", "w"): stat.S_IWUSR, ("u", "x"): stat.S_IXUSR,
    ("g", "r"): stat.S_IRGRP, ("g", "w"): stat.S_IWGRP, ("g", "x"): stat.S_IXGRP,
    ("o", "r"): stat.S_IROTH, ("o", "w"): stat.S_IWOTH, ("o", "x"): stat.S_IXOTH,
    ("u", "s"): stat.S_ISUID, ("g", "s"): stat.S_ISGID, ("o", "t"): stat.S_ISVTX,
}

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR) and user home shortcuts
    (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def invalid_component_reason(name: str) -> Optional[str]:
    """
    Check whether a string is usable as a single path component.

    Args:
        name: Candidate directory or file name.

    Returns:
        Optional[str]: Reason the name is rejected, or None if it is valid.
    """
    if not name:
        return "empty name"
    if name in (".", ".."):
        return f"'{name}' is not allowed as a name"
    if "\0" in name:
        return "name contains a NUL byte"
    if "/" in name or "\\" in name or (os.altsep and os.altsep in name):
        return f"'{name}' contains a path separator"
    return None

# -----------------------------------------------------------------------------
# FILESYSTEM VALIDATION API
# -----------------------------------------------------------------------------

def is_writable_dir(path: str) -> bool:
    """Return True if entries can be created inside the directory."""
    return os.path.isdir(path) and os.access(path, os.W_OK | os.X_OK)

# -----------------------------------------------------------------------------
# NODE OPERATIONS
# -----------------------------------------------------------------------------

def ensure_directory(path: str) -> bool:
    """
    Create a single directory if it does not already exist.

    The parent is expected to exist; the builder creates parents first.

    Args:
        path: Target directory path.

    Returns:
        bool: True if the directory was created, False if it already existed.

    Raises:
        NotADirectoryError: If the path exists but is not a directory.
        OSError: If the path is a symbolic link or cannot be created.
    """
    if os.path.islink(path):
        raise OSError(errno.ELOOP, "Refusing to follow a symbolic link", path)
    if os.path.isdir(path):
        return False
    if os.path.lexists(path):
        raise NotADirectoryError(f"Path exists and is not a directory: {path}")
    try:
        os.mkdir(path)
    except FileExistsError:
        # Lost a race with another writer; accept it if it is a directory.
        if os.path.isdir(path):
            return False
        raise
    return True


def create_placeholder(path: str) -> bool:
    """
    Create an empty file only if nothing exists at the path.

    Uses exclusive creation so an existing file is never truncated.

    Args:
        path: Target file path.

    Returns:
        bool: True if the file was created, False if it already existed.

    Raises:
        OSError: If the file cannot be created.
    """
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
    except FileExistsError:
        return False
    os.close(fd)
    return True


def parse_mode(spec: Union[str, int], current: int = 0) -> int:
    """
    Translate a chmod-style mode specification into numeric permission bits.

    Accepts octal strings ('755', '0750', '2775') and symbolic clauses
    ('u=rwx,g=rx,o=', 'a+x', 'go-w'). Symbolic clauses are applied on top
    of the current mode. Without a who-list the clause applies to all
    classes, ignoring the umask.

    Args:
        spec: Mode specification.
        current: Existing permission bits used as the symbolic baseline.

    Returns:
        int: Resulting permission bits.

    Raises:
        ValueError: If the specification is malformed.
    """
    if isinstance(spec, int):
        if 0 <= spec <= 0o7777:
            return spec
        raise ValueError(f"Mode out of range: {spec}")

    text = str(spec).strip()
    if OCTAL_MODE_RE.match(text):
        return int(text, 8)

    mode = stat.S_IMODE(current)
    if not text:
        raise ValueError("Empty mode specification")

    for clause in text.split(","):
        m = SYMBOLIC_CLAUSE_RE.match(clause.strip())
        if not m:
            raise ValueError(f"Invalid mode clause '{clause}' in '{spec}'")
        who, op, perms = m.groups()
        classes = "ugo" if who in ("", "a") or "a" in who else who

        if perms in ("u", "g", "o"):
            bits = _copy_class_bits(mode, perms, classes)
        else:
            bits = _symbolic_bits(perms, classes, mode, stat.S_ISDIR(current))

        if op == "+":
            mode |= bits
        elif op == "-":
            mode &= ~bits
        else:
            for c in classes:
                mode &= ~_WHO_BITS[c]
            mode |= bits

    return mode


def apply_mode(path: str, spec: Union[str, int], *, keep_owner_access: bool = False) -> int:
    """
    Apply a mode specification to a path.

    Args:
        path: Target path.
        spec: Mode specification (see parse_mode).
        keep_owner_access: Also grant u+rwx, so the owner can still
            populate the directory; the caller restores the exact mode later.

    Returns:
        int: The permission bits the specification resolves to.

    Raises:
        ValueError: If the specification is malformed.
        OSError: If chmod fails.
    """
    current = os.stat(path).st_mode
    mode = parse_mode(spec, current)
    os.chmod(path, (mode | stat.S_IRWXU) if keep_owner_access else mode)
    return mode


def parse_owner(spec: str) -> Tuple[Optional[Union[str, int]], Optional[Union[str, int]]]:
    """
    Split an ownership specification into user and group parts.

    Accepts 'user', 'user:group', ':group' and 'user:' (user only).
    Purely numeric parts are treated as ids.

    Raises:
        ValueError: If neither a user nor a group is given.
    """
    text = str(spec).strip()
    if ":" in text:
        user_part, group_part = text.split(":", 1)
    else:
        user_part, group_part = text, ""

    user = _as_id_or_name(user_part)
    group = _as_id_or_name(group_part)
    if user is None and group is None:
        raise ValueError(f"Invalid owner specification: '{spec}'")
    return user, group


def apply_owner(path: str, spec: str) -> None:
    """
    Apply an ownership specification to a path.

    Raises:
        ValueError: If the specification is malformed.
        LookupError: If the user or group does not exist.
        OSError: If chown fails (typically EPERM when not privileged).
    """
    user, group = parse_owner(spec)
    shutil.chown(path, user=user, group=group)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _as_id_or_name(part: str) -> Optional[Union[str, int]]:
    part = part.strip()
    if not part:
        return None
    return int(part) if part.isdigit() else part


def _symbolic_bits(perms: str, classes: str, mode: int, is_dir: bool) -> int:
    bits = 0
    for c in classes:
        for p in perms:
            if p == "X":
                # Execute only for directories or if any execute bit is already set
                if is_dir or mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH):
                    bits |= _PERM_BITS[(c, "x")]
                continue
            bits |= _PERM_BITS.get((c, p), 0)
    return bits


def _copy_class_bits(mode: int, source: str, classes: str) -> int:
    shift = {"u": 6, "g": 3, "o": 0}
    rwx = (mode >> shift[source]) & 0o7
    bits = 0
    for c in classes:
        bits |= rwx << shift[c]
    return bits
