"""Background worker for the storefront domain.

Periodically expires checkouts whose payment deadline has passed, returning
their reserved stock.

Usage:
    python src/server.py                # Sweep every expiry_sweep_interval_seconds
    python src/server.py --interval 30  # Sweep every 30 seconds
    python src/server.py --once         # Run a single sweep and exit
"""

import argparse
import asyncio

import structlog

from storefront.config import get_settings
from storefront.domain import storefront
from storefront.utils.logging import configure_logging

logger = structlog.get_logger(__name__)


def sweep() -> int:
    from storefront.checkout.expiry import ExpireOverdueCheckouts

    with storefront.domain_context():
        expired = storefront.process(ExpireOverdueCheckouts(), asynchronous=False) or 0
    if expired:
        logger.info("Expiry sweep finished", expired_count=expired)
    return expired


async def run(interval, once=False):
    while True:
        sweep()
        if once:
            return
        await asyncio.sleep(interval)


def main():
    parser = argparse.ArgumentParser(description="Storefront checkout expiry worker")
    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between sweeps (default: expiry_sweep_interval_seconds from config)",
    )
    parser.add_argument("--once", action="store_true", help="Run a single sweep and exit")
    args = parser.parse_args()

    configure_logging()
    storefront.init()
    with storefront.domain_context():
        interval = args.interval or get_settings().expiry_sweep_interval_seconds

    logger.info("Starting expiry worker", interval=interval)
    asyncio.run(run(interval, once=args.once))


if __name__ == "__main__":
    main()
