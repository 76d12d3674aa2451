# src/mesofetcher/fetcher.py

import logging
import time
from typing import Callable, Dict, Optional

from sqlalchemy.engine import Engine

from .catalog import get_all_monster_stats
from .ranges import compute_all_ranges
from .schemas import FetcherConfig, MonsterStats, RunOutcome, RunResult, RunState
from .store import create_store_engine, filter_known_droppers, find_missing_meso_droppers
from .writer import write_script

logger = logging.getLogger(__name__)

CatalogLoader = Callable[[str], Dict[int, MonsterStats]]


class MesoFetcher:
    """
    One-shot audit of drop_data: load stats, compute ranges, find droppers
    missing a meso row and write the proposal script.

    `state` follows LoadingStats -> ComputingRanges -> DetectingCandidates ->
    NothingToDo | RenderingScript -> Done, or Failed on any hard error.
    """

    def __init__(
        self,
        config: FetcherConfig,
        catalog_loader: CatalogLoader = get_all_monster_stats,
        engine: Optional[Engine] = None,
    ):
        self.config = config
        self.catalog_loader = catalog_loader
        self.engine = engine
        self.state: Optional[RunState] = None

    def _enter(self, state: RunState):
        self.state = state
        logger.debug(f"State -> {state.value}")

    def run(self) -> RunResult:
        started = time.perf_counter()
        try:
            self._enter(RunState.LOADING_STATS)
            stats = self.catalog_loader(self.config.catalog_source)

            self._enter(RunState.COMPUTING_RANGES)
            ranges = compute_all_ranges(stats)
            logger.info(f"Computed meso ranges for {len(ranges)} monsters")

            self._enter(RunState.DETECTING_CANDIDATES)
            engine = self.engine or create_store_engine(self.config.db_url)
            try:
                missing = find_missing_meso_droppers(
                    engine, self.config.min_items, self.config.meso_item_id
                )
            finally:
                # store is released before any rendering starts
                if self.engine is None:
                    engine.dispose()
            candidates = filter_known_droppers(missing, ranges)

            if not candidates:
                self._enter(RunState.NOTHING_TO_DO)
                logger.info("The DB is already up-to-date, no file generated.")
                return RunResult(
                    outcome=RunOutcome.UP_TO_DATE,
                    state=self.state,
                    elapsed_ms=_elapsed_ms(started),
                )

            self._enter(RunState.RENDERING_SCRIPT)
            output_file = write_script(self.config.output_file, candidates, ranges, self.config)

            self._enter(RunState.DONE)
            return RunResult(
                outcome=RunOutcome.WRITTEN,
                state=self.state,
                output_file=output_file,
                candidates=candidates,
                elapsed_ms=_elapsed_ms(started),
            )
        except Exception:
            failed_in = self.state
            self._enter(RunState.FAILED)
            logger.exception(f"Meso fetch failed during {failed_in.value if failed_in else 'startup'}")
            raise


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def run(
    config: FetcherConfig,
    catalog_loader: CatalogLoader = get_all_monster_stats,
    engine: Optional[Engine] = None,
) -> RunResult:
    return MesoFetcher(config, catalog_loader=catalog_loader, engine=engine).run()
