"""Schema discovery and path resolution for staging directories."""

import json
import os

from prisma_staging.pacts.types import SchemaPaths
from prisma_staging.core.constants import MANIFEST_FILE, STAGING_DIR

SCHEMA_FILE = "schema.prisma"


def _schema_from_manifest(root: str) -> str | None:
    """Return the schema declared in root/package.json, if any."""
    try:
        with open(os.path.join(root, MANIFEST_FILE), encoding="utf-8") as f:
            declared = (json.load(f).get("prisma") or {}).get("schema")
    except (OSError, ValueError, AttributeError):
        return None
    if not declared:
        return None
    return os.path.join(root, declared)


def discover_schema(root: str) -> str:
    """Locate the schema file under root, the way the generator CLI does."""
    candidates = [
        _schema_from_manifest(root),
        os.path.join(root, SCHEMA_FILE),
        os.path.join(root, "prisma", SCHEMA_FILE),
    ]
    for candidate in candidates:
        if candidate and os.path.isfile(candidate):
            return os.path.abspath(candidate)
    raise FileNotFoundError(f"Could not find a {SCHEMA_FILE} file under {root}")


def resolve_schema_paths(schema_file: str, prisma_path: str) -> SchemaPaths:
    """Compute schema locations relative to the schema root.

    Pure path arithmetic: the schema may live outside prisma_path, in which
    case the relative paths start with '..'.
    """
    schema_dir = os.path.dirname(schema_file)
    return SchemaPaths(
        schema_file=schema_file,
        schema_dir=schema_dir,
        relative_schema=os.path.relpath(schema_file, prisma_path),
        relative_schema_dir=os.path.relpath(schema_dir, prisma_path),
    )


def target_schema_dir(cwd: str, relative_schema_dir: str) -> str:
    """Where the schema directory lands inside a staging directory."""
    return os.path.normpath(os.path.join(cwd, relative_schema_dir))


def staging_dir(function_name: str, service_path: str,
                webpack_output_path: str | None = None) -> str:
    """Staging directory the bundler uses for one function.

    An explicit output path already is the bundler's output folder and holds
    the function folders directly; otherwise it is <service>/.webpack.
    """
    if webpack_output_path:
        return os.path.join(os.path.abspath(webpack_output_path), function_name)
    return os.path.join(os.path.abspath(service_path), STAGING_DIR, function_name)
