from __future__ import annotations

from ..models.config_models import OutputMode
from ..models.mapping_result import MatchKind
from ..models.pipeline_state import PipelineOutcome

"""SUMMARY line rendering for a finished mapping run."""


def _format_seconds(value: float) -> str:
    # 指数表記を避ける
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(outcome: PipelineOutcome, skip_count: int, mode: OutputMode) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY rows={n} header_rows={n} data_rows={n} single={n} multiple={n}
    unmatched={n} written={n} mode={mode} elapsed_sec={s}

    >>> from barcode_mapper.models import PipelineOutcome, PipelineStage, PipelineState
    >>> render_summary_line(PipelineOutcome(PipelineStage.DONE, PipelineState()), 1, OutputMode.SIMPLE)
    'SUMMARY rows=0 header_rows=0 data_rows=0 single=0 multiple=0 unmatched=0 written=0 mode=simple elapsed_sec=0'
    """
    state = outcome.state
    total = len(state.rows)
    header_rows = min(skip_count, total)
    return (
        f"SUMMARY rows={total} "
        f"header_rows={header_rows} "
        f"data_rows={len(state.mapping)} "
        f"single={state.count(MatchKind.SINGLE)} "
        f"multiple={state.count(MatchKind.MULTIPLE)} "
        f"unmatched={state.count(MatchKind.NONE)} "
        f"written={outcome.written_rows} "
        f"mode={mode.value} "
        f"elapsed_sec={_format_seconds(outcome.elapsed_seconds)}"
    )
