"""
Shared fixtures for forge-extract tests.

forge itself is never executed: FakeForge stands in for subprocess.run and
writes the artifact a real `forge build` would produce.
"""

from pathlib import Path
from typing import Any, Dict

import pytest

from forge_extract.tests.fakes import FakeForge, TOKEN_ABI, TOKEN_BYTECODE
from forge_extract.utils.config_manager import ExtractConfig


@pytest.fixture
def home_dir(tmp_path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def project_dir(home_dir) -> Path:
    """A minimal Foundry project at ~/demo with src/Token.sol"""
    root = home_dir / "demo"
    (root / "src").mkdir(parents=True)
    (root / "src" / "Token.sol").write_text("// SPDX-License-Identifier: MIT\ncontract Token {}\n")
    (root / "foundry.toml").write_text("[profile.default]\nsrc = 'src'\nout = 'out'\n")
    return root


@pytest.fixture
def forge_artifact() -> Dict[str, Any]:
    return {"abi": TOKEN_ABI, "bytecode": {"object": TOKEN_BYTECODE}}


@pytest.fixture
def fake_forge(project_dir, forge_artifact) -> FakeForge:
    return FakeForge(project_dir, artifact=forge_artifact)


@pytest.fixture
def forge_binary(home_dir) -> Path:
    """A forge 'installed' at ~/.foundry/bin/forge"""
    bin_dir = home_dir / ".foundry" / "bin"
    bin_dir.mkdir(parents=True)
    forge = bin_dir / "forge"
    forge.write_text("#!/bin/sh\n")
    forge.chmod(0o755)
    return forge


@pytest.fixture
def config(home_dir, tmp_path) -> ExtractConfig:
    return ExtractConfig(home=home_dir, cwd=tmp_path)
