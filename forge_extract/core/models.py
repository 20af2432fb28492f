"""
Data passed between pipeline stages
"""

from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict


@dataclass(frozen=True)
class CompilationRequest:
    """A validated contract to build

    contract_path is relative to project_root when the contract lives under
    it, otherwise absolute.
    """
    project_root: Path
    contract_path: Path

    @property
    def contract_file(self) -> str:
        """Source file name, e.g. Token.sol"""
        return self.contract_path.name

    @property
    def contract_name(self) -> str:
        """Source file name without its extension, e.g. Token"""
        return Path(self.contract_file).stem


@dataclass(frozen=True)
class CompiledArtifact:
    abi: Any
    bytecode: str


@dataclass(frozen=True)
class OutputRecord:
    contract: str
    abi: Any
    bytecode: str

    @classmethod
    def from_artifact(cls, request: CompilationRequest,
                      artifact: CompiledArtifact) -> "OutputRecord":
        return cls(contract=request.contract_name, abi=artifact.abi,
                   bytecode=artifact.bytecode)

    def to_dict(self) -> Dict[str, Any]:
        return OrderedDict([
            ("contract", self.contract),
            ("abi", self.abi),
            ("bytecode", self.bytecode),
        ])
