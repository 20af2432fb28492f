"""
Foundry toolchain discovery, installation and build invocation

All subprocess calls go through an injectable runner with the
subprocess.run signature so tests can stand in for forge.
"""

import logging
import shutil
import subprocess
from typing import Callable, List, Optional

from .input_resolver import expand_home
from .models import CompilationRequest
from ..utils.config_manager import ExtractConfig
from ..utils.exceptions import (
    BuildFailedError,
    ToolchainInstallError,
    ToolchainMissingError,
)

LOG = logging.getLogger(__name__)

FOUNDRY_INSTALL_URL = "https://foundry.paradigm.xyz"
INSTALL_SCRIPT = f"set -o pipefail; curl -L {FOUNDRY_INSTALL_URL} | bash"
INSTALL_HINT = f"curl -L {FOUNDRY_INSTALL_URL} | bash && foundryup"

# `forge --version` prints e.g. "forge 0.2.0 (abc1234 2024-01-01T00:00:00)"
VERSION_MARKER = "forge"


class ForgeToolchain:
    """
    Wraps the forge binary.

    Usage:
        toolchain = ForgeToolchain(config)
        forge = toolchain.ensure()
        toolchain.build(request, forge)
    """

    def __init__(self, config: ExtractConfig,
                 runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
                 which: Callable[[str], Optional[str]] = shutil.which):
        self.config = config
        self._run = runner
        self._which = which

    def _well_known(self, name: str) -> Optional[str]:
        candidate = self.config.foundry_bin_dir / name
        if candidate.is_file():
            return str(candidate)
        return None

    def locate(self) -> Optional[str]:
        """Find forge: explicit binary, then ~/.foundry/bin, then PATH"""
        if self.config.forge_binary:
            explicit = expand_home(self.config.forge_binary, self.config.home)
            if not explicit.is_absolute():
                explicit = self.config.cwd / explicit
            if explicit.is_file():
                return str(explicit)
            found = self._which(self.config.forge_binary)
            if found:
                return found
            raise ToolchainMissingError(
                f"Configured forge binary not found: {self.config.forge_binary}",
                forge_binary=self.config.forge_binary
            )

        return self._well_known("forge") or self._which("forge")

    def verify(self, binary: str) -> bool:
        """Check that `binary --version` looks like Foundry's forge

        A failed check is only a warning; the build is still attempted.
        """
        try:
            result = self._run([binary, "--version"], capture_output=True,
                               text=True, check=False)
        except OSError as e:
            LOG.warning(f"Could not run '{binary} --version': {e}")
            return False

        output = f"{result.stdout or ''}{result.stderr or ''}"
        if result.returncode != 0 or VERSION_MARKER not in output.lower():
            LOG.warning(f"{binary} does not look like Foundry's forge "
                        f"(exit {result.returncode}): {output.strip()!r}")
            return False

        LOG.info(f"Using {output.strip().splitlines()[0]} at {binary}")
        return True

    def _run_install_step(self, cmd: List[str], description: str):
        LOG.info(f"{description}: {' '.join(cmd)}")
        try:
            result = self._run(cmd, check=False)
        except OSError as e:
            raise ToolchainInstallError(f"{description} failed: {e}", command=cmd)
        if result.returncode != 0:
            raise ToolchainInstallError(
                f"{description} failed with exit code {result.returncode}",
                command=cmd, returncode=result.returncode
            )

    def install(self) -> str:
        """Run the Foundry bootstrap script and foundryup

        Returns:
            Path of the freshly installed forge
        """
        print("📦 Foundry not found, installing...")
        self._run_install_step(["bash", "-c", INSTALL_SCRIPT], "Foundry bootstrap")

        foundryup = self._well_known("foundryup") or self._which("foundryup")
        if not foundryup:
            raise ToolchainInstallError(
                f"foundryup not found in {self.config.foundry_bin_dir} after bootstrap"
            )
        self._run_install_step([foundryup], "foundryup")

        forge = self._well_known("forge") or self._which("forge")
        if not forge:
            raise ToolchainInstallError("forge still not found after foundryup")
        return forge

    def ensure(self) -> str:
        """Locate (or install) forge and verify it"""
        forge = self.locate()
        if forge is None:
            if not self.config.auto_install:
                raise ToolchainMissingError(
                    f"Foundry is not installed. Please run: {INSTALL_HINT}"
                )
            forge = self.install()

        self.verify(forge)
        return forge

    def build_command(self, request: CompilationRequest, forge: str) -> List[str]:
        if self.config.build_all:
            return [forge, "build"]
        return [forge, "build", str(request.contract_path)]

    def build(self, request: CompilationRequest, forge: str):
        """Run forge build in the project root, streaming its output"""
        cmd = self.build_command(request, forge)
        print("🛠️  Compiling with Foundry...")
        LOG.info(f"Running {' '.join(cmd)} in {request.project_root}")

        try:
            result = self._run(cmd, cwd=str(request.project_root), check=False)
        except OSError as e:
            raise BuildFailedError(f"Could not start forge: {e}", command=cmd)

        if result.returncode != 0:
            raise BuildFailedError(
                f"forge build failed with exit code {result.returncode}",
                returncode=result.returncode, command=cmd
            )
