"""Schema copy and generated-output shuffling inside a staging directory."""

import os
import shutil

from prisma_staging.pacts.types import ShuffleResult
from prisma_staging.core.constants import DEPENDENCY_DIR


def copy_schema(cwd: str, schema_dir: str, target_dir: str | None = None) -> str:
    """Copy the schema directory into the staging directory.

    Top-level entries named like the dependency directory are left behind, as
    is the target itself when it sits inside the source tree. Existing files
    are overwritten; I/O errors propagate.
    """
    target_dir = target_dir or os.path.join(cwd, "prisma")
    source_root = os.path.realpath(schema_dir)
    target_real = os.path.realpath(target_dir)

    def _ignore(directory, names):
        ignored = set()
        at_root = os.path.realpath(directory) == source_root
        for name in names:
            if at_root and name.startswith(DEPENDENCY_DIR):
                ignored.add(name)
            if os.path.realpath(os.path.join(directory, name)) == target_real:
                ignored.add(name)
        return ignored

    shutil.copytree(schema_dir, target_dir, ignore=_ignore, dirs_exist_ok=True)
    return target_dir


def _move(src: str, dst: str) -> None:
    """Move src to dst, replacing dst and creating its parents."""
    if not os.path.lexists(src):
        raise FileNotFoundError(src)
    if os.path.isdir(dst) and not os.path.islink(dst):
        shutil.rmtree(dst)
    elif os.path.lexists(dst):
        os.remove(dst)
    os.makedirs(os.path.dirname(dst) or ".", exist_ok=True)
    shutil.move(src, dst)


def _shuffle(cwd: str, plugins, outs: dict, to_root: bool) -> ShuffleResult:
    result = ShuffleResult()
    for plugin in plugins:
        out = outs.get(plugin)
        if not out:
            continue
        inside = os.path.join(cwd, DEPENDENCY_DIR, out)
        outside = os.path.join(cwd, out)
        src, dst = (inside, outside) if to_root else (outside, inside)
        try:
            _move(src, dst)
        except (OSError, shutil.Error) as exc:
            result.skipped.append((out, exc))
        else:
            result.moved.append(out)
    return result


def extract_from_dependencies(cwd: str, plugins, outs: dict) -> ShuffleResult:
    """Hoist plugin output out of node_modules before dependencies are removed.

    Never raises: plugins that produced nothing are recorded as skipped.
    """
    return _shuffle(cwd, plugins, outs, to_root=True)


def restore_to_dependencies(cwd: str, plugins, outs: dict) -> ShuffleResult:
    """Put hoisted plugin output back under node_modules."""
    return _shuffle(cwd, plugins, outs, to_root=False)
