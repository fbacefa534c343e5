"""Per-function staging: schema copy, generate, engine pruning, dependency toggling."""

import sys

from prisma_staging.pacts.types import FunctionTarget, StagingConfig
from prisma_staging.core.commands import (
    generate_command, install_command, remove_command, run_command, staged_packages,
)
from prisma_staging.core.config import function_targets
from prisma_staging.core.constants import ENGINE_PATTERNS, LOG_PREFIX
from prisma_staging.core.engines import prune_engines
from prisma_staging.core.files import (
    copy_schema, extract_from_dependencies, restore_to_dependencies,
)
from prisma_staging.core.manifest import ensure_schema_declared
from prisma_staging.core.paths import discover_schema, resolve_schema_paths


def _stderr_log(message: str) -> None:
    print(message, file=sys.stderr)


class StagingOrchestrator:
    """Stage the schema and generated client into each function, one at a time.

    The first failing command aborts the run; staging directories already
    processed are left as they are.
    """

    def __init__(self, config: StagingConfig, schema_file: str | None = None,
                 webpack_output_path: str | None = None,
                 runner=None, log=None, patterns=ENGINE_PATTERNS):
        self.config = config
        self.schema_file = schema_file
        self.webpack_output_path = webpack_output_path
        self.runner = runner or run_command
        self.patterns = patterns
        self._log = log or _stderr_log

    def log(self, message: str) -> None:
        self._log(f"{LOG_PREFIX} {message}")

    async def run(self, only: list[str] | None = None) -> list[FunctionTarget]:
        """Stage every target of the service and return those processed."""
        schema_file = self.schema_file or discover_schema(self.config.prisma_path)
        targets = function_targets(self.config, self.webpack_output_path)
        if only:
            targets = [t for t in targets if t.name in only]
        for target in targets:
            await self.stage_function(target, schema_file)
        return targets

    async def stage_function(self, target: FunctionTarget, schema_file: str) -> None:
        """Run the full sequence for one staging directory."""
        config = self.config
        paths = resolve_schema_paths(schema_file, config.prisma_path)
        patch = ensure_schema_declared(target.cwd, paths.relative_schema_dir,
                                       paths.relative_schema)
        if patch.changed:
            self.log(f"Declared schema {paths.relative_schema} in package.json")

        self.log(f"Copy prisma schema for {target.name}...")
        copy_schema(target.cwd, paths.schema_dir, patch.target_dir)

        packages = staged_packages(config)
        if config.plugins:
            self.log("Install plugins")
            for plugin in config.plugins:
                self.log(f"Install plugin {plugin}")
        if config.install_deps:
            self.log("Install prisma devDependencies for generate")
        if packages:
            await self.runner(install_command(config.packager, packages, dev=True), target.cwd)

        self.log(f"Generate prisma client for {target.name}...")
        if config.data_proxy:
            self.log("Prisma data proxy is enabled.")
        await self.runner(generate_command(config.data_proxy), target.cwd, stream=True)

        self.prune(target)

        # plugin output lives in node_modules, which the removal below rewrites
        extract_from_dependencies(target.cwd, config.plugins, config.outs)
        if packages:
            self.log("Remove prisma devDependencies and plugins")
            await self.runner(remove_command(config.packager, packages), target.cwd)
        restore_to_dependencies(target.cwd, config.plugins, config.outs)

    def prune(self, target: FunctionTarget) -> list[str]:
        """Delete engines built for other platforms."""
        removed = prune_engines(target.cwd, self.patterns)
        if removed:
            self.log("Remove unused prisma engine:")
            for engine in removed:
                self.log(f"  - {engine}")
        return removed
