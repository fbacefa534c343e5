"""Host plugin: exposes the lifecycle hook that triggers staging."""

from prisma_staging.pacts.types import StagingConfig
from prisma_staging.core.constants import HOOK_NAME
from prisma_staging.core.orchestrator import StagingOrchestrator


class PrismaStagingPlugin:
    """Bundler plugin that stages the Prisma client after external modules are packed."""

    def __init__(self, service: dict, service_path: str, options: dict | None = None,
                 log=None, webpack_output_path: str | None = None, runner=None):
        self.service = service or {}
        self.service_path = service_path
        self.options = options or {}
        self.log = log
        self.runner = runner
        # set by the bundler plugin once it knows where it writes
        self.webpack_output_path = webpack_output_path
        self.commands = {}
        self.hooks = {HOOK_NAME: self.on_external_modules_packed}

    def orchestrator(self) -> StagingOrchestrator:
        """A fresh orchestrator built from the current service definition."""
        config = StagingConfig.from_service(self.service, self.service_path)
        return StagingOrchestrator(
            config,
            schema_file=self.options.get("schema"),
            webpack_output_path=self.webpack_output_path,
            log=self.log,
            runner=self.runner,
        )

    async def on_external_modules_packed(self):
        return await self.orchestrator().run(only=self.options.get("functions"))
