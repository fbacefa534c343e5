"""Host configuration: serverless.yml loading and function enumeration."""

import os
import re

import yaml

from prisma_staging.pacts.types import FunctionTarget, StagingConfig
from prisma_staging.core.constants import SERVICE_TARGET
from prisma_staging.core.paths import staging_dir

_NODE_RUNTIME_RE = re.compile(r"node")


class _ServiceLoader(yaml.SafeLoader):
    """SafeLoader that keeps CloudFormation tags (!Ref, !GetAtt, ...) as plain values."""


def _construct_tagged(loader, _suffix, node):
    if isinstance(node, yaml.MappingNode):
        return loader.construct_mapping(node, deep=True)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_scalar(node)


_ServiceLoader.add_multi_constructor("!", _construct_tagged)


def load_service(path: str) -> dict:
    """Load serverless.yml or return an empty service."""
    if not os.path.exists(path):
        return {}
    with open(path) as f:
        service = yaml.load(f, Loader=_ServiceLoader) or {}
    if not isinstance(service, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return service


def load_config(path: str, service_path: str | None = None) -> StagingConfig:
    """Read serverless.yml into a StagingConfig rooted at its directory."""
    service_path = service_path or os.path.dirname(os.path.abspath(path))
    return StagingConfig.from_service(load_service(path), service_path)


def _is_bundled(definition: dict, provider_runtime: str | None) -> bool:
    """True for functions the bundler builds: node runtimes, no prebuilt image."""
    image = definition.get("image")
    if isinstance(image, str) or (isinstance(image, dict) and image.get("uri")):
        return False
    runtime = definition.get("runtime") or provider_runtime or "nodejs"
    return bool(_NODE_RUNTIME_RE.search(runtime))


def function_names(config: StagingConfig) -> list[str]:
    """Names to stage: every bundled function, or the whole service."""
    if not config.package_individually:
        return [SERVICE_TARGET]
    return [name for name, definition in config.functions.items()
            if _is_bundled(definition or {}, config.provider_runtime)]


def function_targets(config: StagingConfig, webpack_output_path: str | None = None) -> list[FunctionTarget]:
    """Staging targets for this run, in configuration order."""
    output_path = webpack_output_path or config.webpack_output_path
    return [FunctionTarget(name=name, cwd=staging_dir(name, config.service_path, output_path))
            for name in function_names(config)]
