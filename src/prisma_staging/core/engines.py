"""Prune native engine binaries that do not match the deployment platform."""

import glob
import os
import shutil


def _glob_files(cwd: str, pattern: str) -> set[str]:
    """Files under cwd matching pattern, as posix paths relative to cwd."""
    matches = set()
    for rel in glob.glob(pattern, root_dir=cwd, recursive=True):
        if os.path.isdir(os.path.join(cwd, rel)):
            continue
        matches.add(rel.replace(os.sep, "/"))
    return matches


def match_patterns(cwd: str, patterns) -> list[str]:
    """Match glob patterns against cwd; '!' patterns exclude paths.

    Exclusions win over positive matches regardless of pattern order.
    """
    included: set[str] = set()
    excluded: set[str] = set()
    for pattern in patterns:
        if pattern.startswith("!"):
            excluded |= _glob_files(cwd, pattern[1:])
        else:
            included |= _glob_files(cwd, pattern)
    return sorted(included - excluded)


def _remove(path: str) -> None:
    """Delete a file or directory; a missing path is fine."""
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


def prune_engines(cwd: str, patterns) -> list[str]:
    """Delete every matched engine under cwd and return the relative paths."""
    unused = match_patterns(cwd, patterns)
    for rel in unused:
        _remove(os.path.join(cwd, rel))
    return unused
