"""Declare the schema location in a staging directory's package.json."""

import json
import os
from pathlib import PurePath

from prisma_staging.pacts.types import ManifestPatch
from prisma_staging.core.constants import MANIFEST_FILE
from prisma_staging.core.paths import target_schema_dir


def ensure_schema_declared(cwd: str, relative_schema_dir: str,
                           relative_schema: str) -> ManifestPatch:
    """Add a prisma.schema entry to cwd/package.json unless one exists.

    Best effort: a missing or unreadable manifest leaves the file untouched
    and the error is returned rather than raised. The file is only rewritten
    when the entry was added.
    """
    patch = ManifestPatch(target_dir=target_schema_dir(cwd, relative_schema_dir), cwd=cwd)
    path = os.path.join(cwd, MANIFEST_FILE)
    try:
        with open(path, encoding="utf-8") as f:
            manifest = json.load(f)
        if manifest.get("prisma") is None:
            # package.json always uses forward slashes
            manifest["prisma"] = {"schema": PurePath(relative_schema).as_posix()}
            with open(path, "w", encoding="utf-8") as f:
                json.dump(manifest, f, indent=2, ensure_ascii=False)
            patch.changed = True
    except (OSError, ValueError, AttributeError) as exc:
        patch.error = exc
    return patch
