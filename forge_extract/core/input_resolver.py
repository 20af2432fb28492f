"""
Input resolution: project directory, contract file and output path

Flag values from ExtractConfig win; anything missing is prompted for when
the run is interactive.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from .models import CompilationRequest
from ..utils.config_manager import ExtractConfig
from ..utils.exceptions import (
    ContractFileNotFoundError,
    DirectoryNotFoundError,
    InputError,
)

LOG = logging.getLogger(__name__)


class Prompter:
    """
    Synchronous line prompts.

    Use as a context manager so the prompt session is closed on every exit
    path. Once closed, further questions raise InputError.
    """

    def __init__(self, input_func: Callable[[str], str] = input):
        self._input = input_func
        self.closed = False

    def ask(self, question: str, default: Optional[str] = None) -> str:
        if self.closed:
            raise InputError("Prompt session already closed")
        if default:
            question = f"{question} [{default}]"
        try:
            answer = self._input(f"{question}: ").strip()
        except EOFError:
            raise InputError(f"No answer for prompt: {question}")
        return answer or (default or "")

    def close(self):
        if not self.closed:
            LOG.debug("Closing prompt session")
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def expand_home(value: str, home: Path) -> Path:
    """Expand a leading '~' against the given home directory"""
    if value == "~":
        return Path(home)
    if value.startswith("~/") or value.startswith("~\\"):
        return Path(home) / value[2:]
    return Path(value)


def resolve_directory(raw: str, config: ExtractConfig) -> Path:
    """Turn user input into an absolute, existing project root"""
    path = expand_home(raw.strip() or ".", config.home)
    if not path.is_absolute():
        path = config.cwd / path
    path = path.resolve()
    if not path.is_dir():
        raise DirectoryNotFoundError(f"Directory does not exist: {path}", path=str(path))
    return path


def resolve_contract(raw: str, project_root: Path, config: ExtractConfig) -> Path:
    """Locate the contract and express it relative to project_root

    Args:
        raw: Path as typed, relative to the project root or absolute
        project_root: Resolved project directory
        config: Run configuration (for '~' expansion)

    Returns:
        Root-relative path, or the absolute path when the file lives outside
        the project root
    """
    if not raw.strip():
        raise ContractFileNotFoundError("No contract file given")

    path = expand_home(raw.strip(), config.home)
    candidate = path if path.is_absolute() else project_root / path
    candidate = candidate.resolve()

    if not candidate.is_file():
        raise ContractFileNotFoundError(f"File not found: {candidate}", path=str(candidate))

    try:
        return candidate.relative_to(project_root)
    except ValueError:
        LOG.debug(f"Contract {candidate} is outside {project_root}, passing absolute path")
        return candidate


def resolve_output(raw: str, config: ExtractConfig) -> Path:
    path = expand_home(raw.strip(), config.home)
    if not path.is_absolute():
        path = config.cwd / path
    return path.resolve()


class InputResolver:
    """Collects and validates everything the run needs from the user"""

    def __init__(self, config: ExtractConfig, prompter: Optional[Prompter] = None):
        self.config = config
        self.prompter = prompter

    def _value(self, flag_value: Optional[str], question: str,
               default: Optional[str] = None, flag: str = "") -> str:
        if flag_value is not None:
            return flag_value
        if self.config.interactive and self.prompter is not None:
            return self.prompter.ask(question, default)
        if default is not None:
            return default
        raise InputError(f"Missing required value, pass {flag}", flag=flag)

    def resolve(self) -> CompilationRequest:
        raw_dir = self._value(self.config.project_dir,
                              "📁 Enter the project directory", default=".", flag="--dir")
        project_root = resolve_directory(raw_dir, self.config)

        raw_file = self._value(self.config.contract_file,
                               "📄 Enter the Solidity file (e.g. src/MyContract.sol)",
                               flag="--file")
        contract_path = resolve_contract(raw_file, project_root, self.config)

        request = CompilationRequest(project_root=project_root, contract_path=contract_path)
        LOG.info(f"Project root: {project_root}, contract: {contract_path}")
        return request

    def resolve_output(self, request: CompilationRequest) -> Path:
        raw_out = self._value(self.config.output_path,
                              "📤 Enter output file path",
                              default=f"build/{request.contract_name}.json",
                              flag="--out")
        return resolve_output(raw_out, self.config)
