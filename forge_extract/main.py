#!/usr/bin/env python3
"""
forge-extract command line

Builds one Solidity contract with Foundry and saves
{"contract", "abi", "bytecode"} to a JSON file.

Usage:
    forge-extract                                  # prompts for everything
    forge-extract --dir ~/demo --file src/Token.sol --out build/Token.json
"""

import argparse
import logging
import shutil
import subprocess
import sys
from typing import Callable, List, Mapping, Optional

from .core.artifact import ArtifactExtractor
from .core.input_resolver import InputResolver, Prompter
from .core.pipeline import ExtractionPipeline
from .core.toolchain import ForgeToolchain
from .utils.config_manager import LOG_LEVELS, ConfigManager
from .utils.exceptions import ConfigurationError
from .utils.logging import setup_logging

LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="forge-extract",
        description="Compile a contract with Foundry and export its ABI and bytecode"
    )
    parser.add_argument("--dir", dest="project_dir", default=None,
                        help="Foundry project directory (prompted if omitted)")
    parser.add_argument("--file", dest="contract_file", default=None,
                        help="Contract file, relative to --dir or absolute")
    parser.add_argument("--out", dest="output_path", default=None,
                        help="Output JSON path (default build/<Contract>.json)")
    parser.add_argument("--forge", dest="forge_binary", default=None,
                        help="Path to the forge binary")
    parser.add_argument("--out-dir", dest="out_dir", default=None,
                        help="Foundry artifact directory inside the project (default: out)")
    parser.add_argument("--install", dest="auto_install", action="store_true", default=None,
                        help="Install Foundry if forge is not found")
    parser.add_argument("--build-all", dest="build_all", action="store_true", default=None,
                        help="Run a plain 'forge build' instead of building only the contract")
    parser.add_argument("--no-input", dest="interactive", action="store_false", default=None,
                        help="Never prompt; fail if a required value is missing")
    parser.add_argument("--config", dest="config_file", default=None,
                        help="YAML config file (default: ./forge-extract.yaml if present)")
    parser.add_argument("--log-level", default=None,
                        choices=LOG_LEVELS,
                        help="Logging level")
    parser.add_argument("--log-file", default=None,
                        help="Path to log file")
    return parser


def main(argv: Optional[List[str]] = None,
         input_func: Callable[[str], str] = input,
         runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
         which: Callable[[str], Optional[str]] = shutil.which,
         environ: Optional[Mapping[str, str]] = None,
         cwd: Optional[str] = None) -> int:
    """Run one extraction and return the process exit code"""
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if k != "config_file"}

    try:
        config = ConfigManager(environ=environ, cwd=cwd).load(args.config_file, overrides)
    except ConfigurationError as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 1

    try:
        setup_logging(config.log_level, config.log_file)
    except ConfigurationError as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 1
    LOG.debug(f"Configuration: {config}")

    with Prompter(input_func) as prompter:
        pipeline = ExtractionPipeline(
            resolver=InputResolver(config, prompter),
            toolchain=ForgeToolchain(config, runner=runner, which=which),
            extractor=ArtifactExtractor(config),
        )
        try:
            result = pipeline.run()
        except KeyboardInterrupt:
            print("\nOperation cancelled by user", file=sys.stderr)
            return 1

    if not result.ok:
        LOG.debug(f"Run aborted: {result.to_dict()}")
        print(f"❌ {result.error.message}", file=sys.stderr)
        return 1
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
