"""
Linear extraction pipeline

read_input -> locate_toolchain -> build -> extract_artifact -> write_output

Each stage runs inside run_stage(), which turns a ForgeExtractError into a
failed StageResult. The driver stops at the first failure; nothing after it
runs, so an aborted run never writes the output file.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from .artifact import ArtifactExtractor
from .input_resolver import InputResolver
from .models import CompilationRequest, OutputRecord
from .output_writer import write_output
from .toolchain import ForgeToolchain
from ..utils.exceptions import ForgeExtractError

LOG = logging.getLogger(__name__)


@dataclass
class StageResult:
    """Outcome of one stage: a value on success, the error otherwise"""
    stage: str
    ok: bool
    value: Any = None
    error: Optional[ForgeExtractError] = None

    @classmethod
    def success(cls, stage: str, value: Any = None) -> "StageResult":
        return cls(stage=stage, ok=True, value=value)

    @classmethod
    def failure(cls, stage: str, error: ForgeExtractError) -> "StageResult":
        return cls(stage=stage, ok=False, error=error)

    def to_dict(self):
        return {
            "stage": self.stage,
            "ok": self.ok,
            "error": self.error.to_dict() if self.error else None,
        }


def run_stage(stage: str, func: Callable[[], Any]) -> StageResult:
    LOG.debug(f"Stage {stage} starting")
    try:
        value = func()
    except ForgeExtractError as e:
        LOG.debug(f"Stage {stage} failed: {e}")
        return StageResult.failure(stage, e)
    return StageResult.success(stage, value)


class ExtractionPipeline:
    """Wires the four components together for a single run"""

    def __init__(self, resolver: InputResolver, toolchain: ForgeToolchain,
                 extractor: ArtifactExtractor):
        self.resolver = resolver
        self.toolchain = toolchain
        self.extractor = extractor

    def run(self) -> StageResult:
        """Run every stage, returning the final result or the first failure"""
        read = run_stage("read_input", self._read_input)
        if not read.ok:
            return read
        request, destination = read.value

        forge = run_stage("locate_toolchain", self.toolchain.ensure)
        if not forge.ok:
            return forge

        build = run_stage("build", lambda: self.toolchain.build(request, forge.value))
        if not build.ok:
            return build

        extracted = run_stage("extract_artifact", lambda: self.extractor.extract(request))
        if not extracted.ok:
            return extracted

        record = OutputRecord.from_artifact(request, extracted.value)
        return run_stage("write_output", lambda: write_output(record, destination))

    def _read_input(self):
        request: CompilationRequest = self.resolver.resolve()
        destination: Path = self.resolver.resolve_output(request)
        return request, destination
