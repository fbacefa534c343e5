from __future__ import annotations

import asyncio
import io
import subprocess
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from _testutil import write

from prisma_staging.pacts.types import StagingConfig
from prisma_staging.core.commands import (
    generate_command, install_command, remove_command, run_command, staged_packages,
)
from prisma_staging.core.config import function_names, function_targets, load_config, load_service


SERVERLESS_YML = """\
service: api
provider:
  name: aws
  runtime: nodejs18.x
  role: !GetAtt LambdaRole.Arn
package:
  individually: true
custom:
  webpack:
    packager: yarn
  prisma:
    plugins:
      - typegraphql-prisma
    outs:
      prisma-nestjs-graphql: "@generated/nestjs"
    dataProxy: true
functions:
  graphql:
    handler: src/graphql.handler
  py:
    handler: handler.main
    runtime: python3.11
  container:
    image: 123.dkr.ecr/api:latest
  container_uri:
    image:
      uri: 123.dkr.ecr/api:latest
  cron:
    handler: src/cron.handler
    environment:
      QUEUE: !Ref Queue
"""


class TestConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = StagingConfig.from_service({}, "/srv/api")

        self.assertEqual(config.packager, "npm")
        self.assertEqual(config.prisma_path, "/srv/api")
        self.assertEqual(config.webpack_output_path, "")
        self.assertEqual(function_targets(config)[0].cwd, "/srv/api/.webpack/service")
        self.assertEqual(config.plugins, ())
        self.assertEqual(config.outs, {"typegraphql-prisma": "@generated/type-graphql"})
        self.assertTrue(config.install_deps)
        self.assertFalse(config.data_proxy)
        self.assertEqual(function_names(config), ["service"])

    def test_load_serverless_yml(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = write(Path(td) / "serverless.yml", SERVERLESS_YML)

            config = load_config(str(path))

            self.assertEqual(config.service_path, td)
            self.assertEqual(config.packager, "yarn")
            self.assertEqual(config.plugins, ("typegraphql-prisma",))
            self.assertEqual(config.outs, {
                "typegraphql-prisma": "@generated/type-graphql",
                "prisma-nestjs-graphql": "@generated/nestjs",
            })
            self.assertTrue(config.data_proxy)
            self.assertEqual(function_names(config), ["graphql", "cron"])
            self.assertEqual(
                [t.cwd for t in function_targets(config)],
                [str(Path(td) / ".webpack" / "graphql"), str(Path(td) / ".webpack" / "cron")],
            )

    def test_output_path_override(self) -> None:
        config = StagingConfig.from_service(
            {"custom": {"webpack": {"webpackOutputPath": "/build"}}}, "/srv/api")

        self.assertEqual(function_targets(config)[0].cwd, "/build/service")
        self.assertEqual(function_targets(config, "/other")[0].cwd, "/other/service")

    def test_relative_paths_resolve_against_service_root(self) -> None:
        service = {"custom": {"prisma": {"prismaPath": "."}, "webpack": {"webpackOutputPath": "build/.webpack"}}}
        config = StagingConfig.from_service(service, "/srv/api")

        self.assertEqual(config.prisma_path, "/srv/api")
        self.assertEqual(config.webpack_output_path, "/srv/api/build/.webpack")
        self.assertEqual(function_targets(config)[0].cwd, "/srv/api/build/.webpack/service")

        config = StagingConfig.from_service({"custom": {"prisma": {"prismaPath": "/abs/db"}}}, "/srv/api")
        self.assertEqual(config.prisma_path, "/abs/db")

    def test_missing_file_is_empty_service(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            self.assertEqual(load_service(str(Path(td) / "serverless.yml")), {})

    def test_config_is_frozen(self) -> None:
        config = StagingConfig.from_service({}, "/srv")
        with self.assertRaises(AttributeError):
            config.packager = "yarn"


class TestCommandForms(unittest.TestCase):
    def test_npm(self) -> None:
        self.assertEqual(install_command("npm", ["typegraphql-prisma", "prisma"], dev=True),
                         ["npm", "install", "-D", "typegraphql-prisma", "prisma", "--ignore-scripts"])
        self.assertEqual(remove_command("npm", ["prisma"]), ["npm", "remove", "prisma"])

    def test_yarn(self) -> None:
        self.assertEqual(install_command("yarn", ["prisma"], dev=True), ["yarn", "add", "-D", "prisma"])
        self.assertEqual(install_command("yarn", ["prisma"]), ["yarn", "add", "prisma"])
        self.assertEqual(remove_command("yarn", ["a", "b"]), ["yarn", "remove", "a", "b"])

    def test_generate(self) -> None:
        self.assertEqual(generate_command(), ["npx", "prisma", "generate"])
        self.assertEqual(generate_command(True), ["npx", "prisma", "generate", "--data-proxy"])

    def test_staged_packages(self) -> None:
        config = StagingConfig(service_path="/srv", plugins=("b-plugin", "a-plugin"))
        self.assertEqual(staged_packages(config), ["b-plugin", "a-plugin", "prisma"])

        config = StagingConfig(service_path="/srv", install_deps=False)
        self.assertEqual(staged_packages(config), [])


class TestRunCommand(unittest.TestCase):
    def test_streams_and_captures_stdout(self) -> None:
        out, err = io.StringIO(), io.StringIO()
        with tempfile.TemporaryDirectory() as td, redirect_stdout(out), redirect_stderr(err):
            result = asyncio.run(run_command(
                [sys.executable, "-c", "print('generated client')"], td, stream=True))

        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout.strip(), "generated client")
        self.assertIn("generated client", out.getvalue())
        self.assertIn("Running:", err.getvalue())

    def test_quiet_by_default(self) -> None:
        out = io.StringIO()
        with tempfile.TemporaryDirectory() as td, redirect_stdout(out), redirect_stderr(io.StringIO()):
            result = asyncio.run(run_command([sys.executable, "-c", "print('x')"], td))

        self.assertEqual(result.stdout.strip(), "x")
        self.assertEqual(out.getvalue(), "")

    def test_very_long_output_line(self) -> None:
        out = io.StringIO()
        script = "import sys; sys.stdout.write(''.join(['x'] * 200000) + '\\n')"
        with tempfile.TemporaryDirectory() as td, redirect_stdout(out), redirect_stderr(io.StringIO()):
            result = asyncio.run(run_command([sys.executable, "-c", script], td, stream=True))

        self.assertEqual(result.returncode, 0)
        self.assertEqual(len(result.stdout), 200001)
        self.assertEqual(out.getvalue(), result.stdout)

    def test_non_zero_exit_raises(self) -> None:
        with tempfile.TemporaryDirectory() as td, redirect_stderr(io.StringIO()):
            with self.assertRaises(subprocess.CalledProcessError) as ctx:
                asyncio.run(run_command(
                    [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"], td))

        self.assertEqual(ctx.exception.returncode, 3)
        self.assertEqual(ctx.exception.stderr, "boom")

    def test_missing_executable_raises(self) -> None:
        with tempfile.TemporaryDirectory() as td, redirect_stderr(io.StringIO()):
            with self.assertRaises(OSError):
                asyncio.run(run_command(["definitely-not-a-real-binary-xyz"], td))


if __name__ == "__main__":
    unittest.main()
