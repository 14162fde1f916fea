# src/workflows/up_ahead.py
import logging
import time
from datetime import datetime
from typing import List, Optional, Sequence

from core.schemas import UpAheadDigest
from ingestion.base import RawFeedItem, SourceAdapter
from ingestion.fetcher import fetch_all
from ingestion.source_factory import create_adapters_from_settings
from processing.aggregator import AggregationResult, aggregate
from processing.normalizer import normalize_batch
from services.config import Config, UpAheadSettings
from services.planner_store import PlannerStore
from workflows.base import DigestPipeline

logger = logging.getLogger(__name__)


async def build_digest(
    raw_items: Sequence[RawFeedItem],
    settings: Optional[UpAheadSettings] = None,
    planner: Optional[PlannerStore] = None,
    now: Optional[datetime] = None,
) -> AggregationResult:
    """
    Normalize, aggregate and (optionally) record dated items in the planner.

    Planner write failures never affect the returned digest.
    """
    normalized = normalize_batch(list(raw_items), reference=now)
    logger.info(f"Normalized {len(normalized)} of {len(raw_items)} items")

    result = aggregate(normalized, settings, now=now)

    if planner is not None:
        try:
            added = await planner.merge_items(result.dated_items)
            logger.info(f"Planner store: {added} new entries")
        except Exception as e:
            logger.warning(f"Planner store merge failed: {e}")

    return result


class UpAheadPipeline(DigestPipeline):
    name = "up_ahead"

    def __init__(
        self,
        config: Config,
        planner: Optional[PlannerStore] = None,
        sources: Optional[List[SourceAdapter]] = None,
    ):
        self.config = config
        self.settings = config.up_ahead
        self.planner = planner

        if sources is not None:
            self.sources = sources
        else:
            self.sources = create_adapters_from_settings(
                self.settings,
                window=config.SEARCH_WINDOW,
                timeout=config.FETCH_TIMEOUT_SECONDS,
            )

        self.last_result: Optional[AggregationResult] = None

    async def run(self, now: Optional[datetime] = None) -> Optional[UpAheadDigest]:
        start_time = time.perf_counter()

        try:
            items = await fetch_all(
                self.sources,
                concurrency=self.config.FETCH_CONCURRENCY,
                timeout=self.config.FETCH_TIMEOUT_SECONDS,
            )

            if not items:
                logger.info(f"[{self.name}] No items fetched")

            result = await build_digest(items, self.settings, self.planner, now=now)
            self.last_result = result

        except Exception as e:
            logger.exception(f"Pipeline error: {e}")
            return None

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            f"[{self.name}] {result.digest.timeline_count} timeline items "
            f"from {len(self.sources)} feeds in {duration_ms}ms"
        )
        return result.digest
