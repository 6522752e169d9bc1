from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path helpers and node classification primitives used by the
traverser. Classification never follows symbolic links: a link is always
reported as a link, whether or not its target exists.
"""

import os
import stat

from qdir.domain.constants import APP_NAME, HIDDEN_PREFIX
from qdir.domain.traversal_models import EntryKind

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

UNIX_APP_DIR_NAME = f".{APP_NAME}"
CONFIG_FILE_NAME = "config.json"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the directory holding the persistent qdir configuration.

    Unlike log directories, it is not created: a missing directory simply
    means no configuration file.

    Returns:
        str: Absolute path, e.g. ~/.qdir.
    """
    try:
        home = os.path.expanduser("~")
        return os.path.abspath(os.path.join(home, UNIX_APP_DIR_NAME))
    except Exception:
        return os.path.abspath(UNIX_APP_DIR_NAME)


def get_default_config_path() -> str:
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def base_name(path: str) -> str:
    """
    Return the last component of a path, ignoring trailing separators.

    Mirrors POSIX basename(3): 'a/b/' -> 'b', '/' -> '/'.
    """
    stripped = path.rstrip(os.sep)
    if not stripped:
        return os.sep if path else ""
    return os.path.basename(stripped)


def is_hidden(path: str) -> bool:
    """True when the base name of the path starts with a dot."""
    return base_name(path).startswith(HIDDEN_PREFIX)

# -----------------------------------------------------------------------------
# CLASSIFICATION API
# -----------------------------------------------------------------------------

def classify_path(path: str) -> EntryKind:
    """
    Classify a path with lstat(2).

    Raises:
        OSError: If the path does not exist or cannot be inspected.
    """
    mode = os.lstat(path).st_mode
    if stat.S_ISLNK(mode):
        return _classify_link(path)
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.REGULAR_FILE
    return EntryKind.UNKNOWN


def classify_entry(entry: os.DirEntry) -> EntryKind:
    """
    Classify a scandir entry, reusing the d_type cached by the OS when available.

    Entries that vanish or cannot be inspected between listing and
    classification are reported as UNKNOWN.
    """
    try:
        if entry.is_symlink():
            return _classify_link(entry.path)
        if entry.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
        if entry.is_file(follow_symlinks=False):
            return EntryKind.REGULAR_FILE
    except OSError:
        return EntryKind.UNKNOWN
    return EntryKind.UNKNOWN


def _classify_link(path: str) -> EntryKind:
    """A link whose target cannot be resolved is dangling."""
    if os.path.exists(path):
        return EntryKind.SYMBOLIC_LINK
    return EntryKind.DANGLING_SYMBOLIC_LINK
