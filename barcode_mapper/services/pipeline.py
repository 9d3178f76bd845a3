from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import AbstractContextManager
from pathlib import Path
from typing import TextIO

from ..csvio.reader import STDIN_SENTINEL, read_rows
from ..db.catalog import CatalogLookup
from ..errors import BarcodeMapperError, FileAccessError
from ..models.config_models import MappingOptions
from ..models.pipeline_state import PipelineOutcome, PipelineStage, PipelineState
from .mapping import resolve_all
from .progress import ResolveProgress
from .render import get_renderer
from .resolver import BarcodeResolver

"""Pipeline driver: load -> resolve -> render.

State machine (linear):
    LOADED -> RESOLVED -> RENDERED -> DONE
Any stage error moves straight to FAILED; the remaining stages are not run.
Errors are returned inside PipelineOutcome instead of being raised.
"""

logger = logging.getLogger(__name__)

CatalogFactory = Callable[[], AbstractContextManager[CatalogLookup]]


def load_stage(source: str | Path) -> PipelineState:
    rows = tuple(read_rows(source))
    logger.info(f"loaded {len(rows)} row(s) from {'stdin' if str(source) == STDIN_SENTINEL else source}")
    return PipelineState(rows=rows)


def resolve_stage(state: PipelineState, options: MappingOptions, open_catalog: CatalogFactory) -> PipelineState:
    data_rows = max(len(state.rows) - options.skip_count, 0)
    # カタログセッションは解決処理の間だけ保持する
    with open_catalog() as lookup:
        resolver = BarcodeResolver(lookup)
        with ResolveProgress(data_rows) as progress:
            mapping = resolve_all(state.rows, options, resolver, on_row=progress.advance)
    logger.info(f"resolved {len(mapping)} barcode(s)")
    return state.with_mapping(mapping)


def render_stage(state: PipelineState, options: MappingOptions, out: TextIO) -> int:
    renderer = get_renderer(options.mode)
    try:
        written = renderer(state.rows, state.mapping, options.skip_count, out)
        out.flush()
    except OSError as e:
        raise FileAccessError(str(e), "<output>") from e
    return written


def run_pipeline(
    source: str | Path,
    options: MappingOptions,
    open_catalog: CatalogFactory,
    out: TextIO,
) -> PipelineOutcome:
    """Run all stages and return the outcome (never raises BarcodeMapperError)."""
    start = time.perf_counter()
    state = PipelineState()
    step = "load"
    try:
        state = load_stage(source)
        logger.debug(f"stage={PipelineStage.LOADED.value}")

        step = "resolve"
        state = resolve_stage(state, options, open_catalog)
        logger.debug(f"stage={PipelineStage.RESOLVED.value}")

        step = "render"
        written = render_stage(state, options, out)
        logger.debug(f"stage={PipelineStage.RENDERED.value} written={written}")
    except BarcodeMapperError as e:
        logger.debug(f"stage={PipelineStage.FAILED.value} during {step}: {e}")
        return PipelineOutcome(
            stage=PipelineStage.FAILED,
            state=state,
            elapsed_seconds=time.perf_counter() - start,
            failed_stage=step,
            error=e,
        )

    return PipelineOutcome(
        stage=PipelineStage.DONE,
        state=state,
        written_rows=written,
        elapsed_seconds=time.perf_counter() - start,
    )
