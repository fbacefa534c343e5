"""prisma-staging command line: run the staging hook for a service directory."""

import argparse
import asyncio
import os
import subprocess
import sys

from prisma_staging.core.config import load_service
from prisma_staging.core.constants import HOOK_NAME
from prisma_staging.plugin import PrismaStagingPlugin


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Stage the Prisma schema and client into bundled functions"
    )
    parser.add_argument(
        "--service-dir", default=".",
        help="Service root containing serverless.yml (default: .)",
    )
    parser.add_argument(
        "--config",
        help="Service definition file (default: <service-dir>/serverless.yml)",
    )
    parser.add_argument(
        "--schema",
        help="Schema file to use instead of discovering it",
    )
    parser.add_argument(
        "--webpack-output-path",
        help="Bundler output folder holding one directory per function "
             "(default: custom.webpack.webpackOutputPath, else <service-dir>/.webpack)",
    )
    parser.add_argument(
        "-f", "--function", action="append", dest="functions",
        help="Only stage this function (repeatable)",
    )
    args = parser.parse_args(argv)

    service_dir = os.path.abspath(args.service_dir)
    config_path = args.config or os.path.join(service_dir, "serverless.yml")
    service = load_service(config_path)
    options = {"functions": args.functions}
    if args.schema:
        options["schema"] = os.path.abspath(args.schema)

    plugin = PrismaStagingPlugin(service, service_dir, options=options,
                                 webpack_output_path=args.webpack_output_path)
    try:
        targets = asyncio.run(plugin.hooks[HOOK_NAME]())
    except subprocess.CalledProcessError as exc:
        print(f"Command failed ({exc.returncode}): {' '.join(exc.cmd)}", file=sys.stderr)
        if exc.stderr:
            print(exc.stderr, file=sys.stderr)
        return exc.returncode or 1
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not targets:
        print("No functions to stage — nothing to do.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
