"""Public data types shared by the staging steps."""

import os
from dataclasses import dataclass, field

from prisma_staging.core.constants import DEFAULT_OUTS


def _resolve(service_path: str, value: str | None) -> str:
    """Anchor a configured path at the service root; absolute paths pass through."""
    if not value:
        return ""
    return os.path.normpath(os.path.join(service_path, value))


def _get(mapping, path: str, default=None):
    """Read a dotted path from nested dicts, falling back to default."""
    node = mapping
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return default if node is None else node


@dataclass(frozen=True)
class StagingConfig:
    """Settings read once from the host's service definition."""
    service_path: str
    packager: str = "npm"
    prisma_path: str = ""
    webpack_output_path: str = ""
    plugins: tuple = ()
    outs: dict = field(default_factory=lambda: dict(DEFAULT_OUTS))
    install_deps: bool = True
    data_proxy: bool = False
    package_individually: bool = False
    functions: dict = field(default_factory=dict)
    provider_runtime: str | None = None

    @classmethod
    def from_service(cls, service: dict, service_path: str) -> "StagingConfig":
        """Build the config from a parsed serverless.yml mapping."""
        service = service or {}
        return cls(
            service_path=service_path,
            packager=_get(service, "custom.webpack.packager", "npm"),
            prisma_path=_resolve(service_path, _get(service, "custom.prisma.prismaPath")) or service_path,
            webpack_output_path=_resolve(service_path, _get(service, "custom.webpack.webpackOutputPath")),
            plugins=tuple(_get(service, "custom.prisma.plugins", [])),
            outs={**DEFAULT_OUTS, **_get(service, "custom.prisma.outs", {})},
            install_deps=bool(_get(service, "custom.prisma.installDeps", True)),
            data_proxy=bool(_get(service, "custom.prisma.dataProxy", False)),
            package_individually=bool(_get(service, "package.individually", False)),
            functions=dict(_get(service, "functions", {})),
            provider_runtime=_get(service, "provider.runtime"),
        )


@dataclass(frozen=True)
class FunctionTarget:
    """One packaged function and its staging directory."""
    name: str
    cwd: str


@dataclass(frozen=True)
class SchemaPaths:
    """Schema location, relative to the schema root."""
    schema_file: str
    schema_dir: str
    relative_schema: str
    relative_schema_dir: str


@dataclass
class ManifestPatch:
    """Outcome of declaring the schema in package.json."""
    target_dir: str
    cwd: str
    changed: bool = False
    error: Exception | None = None


@dataclass
class CommandResult:
    """Outcome of an external command."""
    args: list
    returncode: int
    stdout: str = ""
    stderr: str = ""


@dataclass
class ShuffleResult:
    """Generated-output moves that succeeded or were skipped."""
    moved: list = field(default_factory=list)
    skipped: list = field(default_factory=list)
