"""External commands: package-manager install/remove and prisma generate."""

import asyncio
import codecs
import subprocess
import sys

from prisma_staging.pacts.types import CommandResult, StagingConfig
from prisma_staging.core.constants import GENERATOR_PACKAGE

_CHUNK_SIZE = 65536


def staged_packages(config: StagingConfig) -> list[str]:
    """Packages installed for the generate step, in a stable order."""
    packages = list(config.plugins)
    if config.install_deps and GENERATOR_PACKAGE not in packages:
        packages.append(GENERATOR_PACKAGE)
    return packages


def install_command(packager: str, packages: list[str], dev: bool = False) -> list[str]:
    """Build the install command; npm is the default, anything else is yarn."""
    flags = ["-D"] if dev else []
    if packager == "npm":
        # lifecycle scripts would try to download engines again
        return ["npm", "install", *flags, *packages, "--ignore-scripts"]
    return ["yarn", "add", *flags, *packages]


def remove_command(packager: str, packages: list[str]) -> list[str]:
    """Build the uninstall command."""
    if packager == "npm":
        return ["npm", "remove", *packages]
    return ["yarn", "remove", *packages]


def generate_command(data_proxy: bool = False) -> list[str]:
    """Build the prisma generate command."""
    cmd = ["npx", "prisma", "generate"]
    if data_proxy:
        cmd.append("--data-proxy")
    return cmd


async def _forward(stream, sink, chunks: list[str]) -> None:
    """Copy a child's output as it arrives, keeping a copy.

    Reads in fixed-size chunks so arbitrarily long lines never hit the
    StreamReader line limit.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        data = await stream.read(_CHUNK_SIZE)
        text = decoder.decode(data, final=not data)
        if text:
            chunks.append(text)
            if sink is not None:
                sink.write(text)
                sink.flush()
        if not data:
            break


async def run_command(cmd: list[str], cwd: str, stream: bool = False) -> CommandResult:
    """Run cmd in cwd and wait for it to exit.

    With stream=True the child's stdout is echoed to our stdout as it arrives.
    A non-zero exit raises CalledProcessError; spawn failures raise OSError.
    """
    print(f"Running: {' '.join(cmd)}", file=sys.stderr)
    proc = await asyncio.create_subprocess_exec(
        *cmd, cwd=cwd,
        stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE,
    )
    out: list[str] = []
    err: list[str] = []
    await asyncio.gather(
        _forward(proc.stdout, sys.stdout if stream else None, out),
        _forward(proc.stderr, None, err),
    )
    returncode = await proc.wait()
    result = CommandResult(args=list(cmd), returncode=returncode,
                           stdout="".join(out), stderr="".join(err))
    if returncode != 0:
        raise subprocess.CalledProcessError(returncode, cmd, output=result.stdout,
                                            stderr=result.stderr)
    return result
