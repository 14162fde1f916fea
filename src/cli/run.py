import argparse
import asyncio
from datetime import date
import logging
import time
from typing import List, Optional

from services.config import load_config
from services.logging import setup_logging
from services.database import Database
from services.planner_store import PlannerStore
from workflows.up_ahead import UpAheadPipeline
from delivery.file_delivery import FileDelivery
from delivery.base import DeliveryChannel


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the Up Ahead digest")
    parser.add_argument("--config", help="Path to config.yml (default: resources/config.yml)")
    parser.add_argument("--output-dir", help="Where to write the digest files")
    parser.add_argument("--no-planner", action="store_true", help="Skip the planner store")
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> None:
    start_time = time.perf_counter()
    args = parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.LOG_LEVEL.upper())
    logger = logging.getLogger(__name__)

    today = date.today().isoformat()

    logger.info("Starting Up Ahead run")

    # ----------------------------
    # Initialize shared services
    # ----------------------------
    planner = None
    if config.PLANNER_ENABLED and not args.no_planner:
        planner = PlannerStore(Database(config.DATABASE_PATH))

    pipeline = UpAheadPipeline(config=config, planner=planner)

    deliveries = list[DeliveryChannel]([FileDelivery(args.output_dir or config.OUTPUT_DIR)])

    # ----------------------------
    # Execute pipeline
    # ----------------------------
    digest = await pipeline.run()

    if digest is None:
        logger.error(f"Pipeline failed: {pipeline.name}")
    else:
        for delivery in deliveries:
            try:
                await delivery.deliver(
                    digest_name=pipeline.name,
                    digest_date=today,
                    digest=digest,
                )
                logger.info(f"Delivered {pipeline.name} digest via {delivery.name}")
            except Exception as e:
                logger.error(
                    f"Delivery failed: digest={pipeline.name}, channel={delivery.name}, error={e}"
                )

    logger.info("Up Ahead run completed")
    end_time = time.perf_counter()
    logger.info(f"Total time: {end_time - start_time}")


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
