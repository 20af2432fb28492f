"""
Read forge build artifacts and pull out ABI and bytecode
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from .models import CompilationRequest, CompiledArtifact
from ..utils.config_manager import ExtractConfig
from ..utils.exceptions import ArtifactFieldsMissingError, ArtifactNotFoundError

LOG = logging.getLogger(__name__)

BytecodeStrategy = Tuple[str, Callable[[Dict[str, Any]], Any]]


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


# Tried in order, first non-empty string wins
BYTECODE_STRATEGIES: Sequence[BytecodeStrategy] = (
    ("bytecode.object", lambda data: _dig(data, "bytecode", "object")),
    ("evm.bytecode.object", lambda data: _dig(data, "evm", "bytecode", "object")),
    ("bytecode", lambda data: data.get("bytecode")),
)


def artifact_path(request: CompilationRequest, out_dir: str = "out") -> Path:
    """out/<Contract.sol>/<Contract>.json under the project root"""
    return request.project_root / out_dir / request.contract_file / f"{request.contract_name}.json"


def extract_bytecode(data: Dict[str, Any],
                     strategies: Sequence[BytecodeStrategy] = BYTECODE_STRATEGIES) -> Optional[str]:
    for name, strategy in strategies:
        value = strategy(data)
        if isinstance(value, str) and value:
            LOG.debug(f"Bytecode found at '{name}'")
            return value
    return None


class ArtifactExtractor:
    """Loads the artifact emitted for one contract"""

    def __init__(self, config: ExtractConfig,
                 strategies: Sequence[BytecodeStrategy] = BYTECODE_STRATEGIES):
        self.config = config
        self.strategies = strategies

    def load(self, request: CompilationRequest) -> Dict[str, Any]:
        path = artifact_path(request, self.config.out_dir)
        if not path.is_file():
            raise ArtifactNotFoundError(f"Compiled output not found: {path}", path=str(path))

        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ArtifactNotFoundError(f"Compiled output {path} is not valid JSON: {e}",
                                        path=str(path))
        except OSError as e:
            raise ArtifactNotFoundError(f"Could not read compiled output {path}: {e}",
                                        path=str(path))

        if not isinstance(data, dict):
            raise ArtifactFieldsMissingError(
                f"ABI or bytecode missing in compiled output: {path} is not a JSON object",
                path=str(path)
            )
        return data

    def extract(self, request: CompilationRequest) -> CompiledArtifact:
        data = self.load(request)
        abi = data.get("abi")
        bytecode = extract_bytecode(data, self.strategies)

        missing = []
        # An empty ABI list or object is a valid interface for a contract with no functions
        if abi is None or (not abi and not isinstance(abi, (list, dict))):
            missing.append("abi")
        if not bytecode:
            missing.append("bytecode")
        if missing:
            raise ArtifactFieldsMissingError(
                f"ABI or bytecode missing in compiled output ({', '.join(missing)})",
                missing=missing
            )

        return CompiledArtifact(abi=abi, bytecode=bytecode)
