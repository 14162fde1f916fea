"""
Concurrent fetching across sources with a bounded fan-out.
"""
import asyncio
import logging
from typing import List, Sequence

from ingestion.base import RawFeedItem, SourceAdapter

logger = logging.getLogger(__name__)


async def fetch_source(
    source: SourceAdapter,
    semaphore: asyncio.Semaphore,
    timeout: float,
) -> List[RawFeedItem]:
    """Fetch one source; a failure or timeout contributes no items."""
    async with semaphore:
        try:
            return await asyncio.wait_for(source.fetch_items(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Source {source.name} timed out after {timeout}s")
        except Exception as e:
            logger.warning(f"Source {source.name} failed: {e}")
    return []


async def fetch_all(
    sources: Sequence[SourceAdapter],
    concurrency: int = 8,
    timeout: float = 15.0,
) -> List[RawFeedItem]:
    """
    Fetch every source concurrently, at most `concurrency` at a time.

    Returns:
        Items from all sources, in source order
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))
    results = await asyncio.gather(
        *(fetch_source(source, semaphore, timeout) for source in sources)
    )

    items = [item for batch in results for item in batch]
    logger.info(f"Fetched {len(items)} items from {len(sources)} sources")
    return items
