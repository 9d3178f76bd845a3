from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from .mapping_result import MappingResult, MatchKind, Row

"""Pipeline state and outcome models.

PipelineState is the immutable snapshot threaded through the stages;
each stage returns a new instance via `replace`.
"""


class PipelineStage(str, Enum):
    LOADED = "loaded"
    RESOLVED = "resolved"
    RENDERED = "rendered"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineState:
    rows: tuple[Row, ...] = ()
    mapping: tuple[MappingResult, ...] = ()

    def with_mapping(self, mapping: tuple[MappingResult, ...]) -> PipelineState:
        return replace(self, mapping=mapping)

    def count(self, kind: MatchKind) -> int:
        return sum(1 for m in self.mapping if m.kind is kind)


@dataclass(frozen=True)
class PipelineOutcome:
    """Explicit result of a pipeline run.

    On failure `stage` is FAILED, `failed_stage` names the stage that was
    running and `error` holds the exception; nothing after it was executed.
    """
    stage: PipelineStage
    state: PipelineState = field(default_factory=PipelineState)
    written_rows: int = 0
    elapsed_seconds: float = 0.0
    failed_stage: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.stage is PipelineStage.DONE
