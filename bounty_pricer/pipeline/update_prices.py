from __future__ import annotations

import argparse
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from bounty_pricer.api.coinbase import PriceClient
from bounty_pricer.config import JobConfig, load_config, load_env, require_database_url
from bounty_pricer.db import store
from bounty_pricer.db.bounties import BountySource, build_source
from bounty_pricer.models import Prices, UpdateResult
from bounty_pricer.pipeline.resolve import SchemaResolver, build_resolver
from bounty_pricer.pricing.policy import should_update
from bounty_pricer.pricing.revalue import revalue_bounties

logger = logging.getLogger(__name__)


def fetch_current_prices(price_client: PriceClient) -> Prices:
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="price") as pool:
        eth = pool.submit(price_client.fetch_usd_price, "eth")
        degen = pool.submit(price_client.fetch_usd_price, "degen")
        return Prices(eth_usd=eth.result(), degen_usd=degen.result())


def run_update(
    config: JobConfig,
    connect: Callable[[str], object] = store.get_connection,
    price_client: PriceClient | None = None,
    resolver: SchemaResolver | None = None,
    source_factory: Callable[[str], BountySource] | None = None,
) -> UpdateResult:
    database_url = require_database_url(config)
    if price_client is None:
        price_client = PriceClient(
            base_url=config.price_api_url,
            timeout_s=config.http_timeout_s,
            max_attempts=config.max_attempts,
            retry_wait_s=config.retry_wait_s,
        )
    if resolver is None:
        resolver = build_resolver(config)
    if source_factory is None:
        layout = config.bounties

        def source_factory(schema: str) -> BountySource:
            return build_source(layout.layout, schema, table=layout.table, extra_table=layout.extra_table)

    conn = connect(database_url)
    transaction_open = True
    try:
        previous = store.fetch_latest_price(conn, config.price_schema, config.price_table)
        current = fetch_current_prices(price_client)

        if not should_update(current, previous, config.threshold_percent):
            conn.rollback()
            transaction_open = False
            logger.info(
                "price change below %s%%, skipping bounty updates",
                config.threshold_percent,
            )
            return UpdateResult(did_update=False, prices=previous.prices())

        store.insert_price(conn, current, config.price_schema, config.price_table)
        schema = resolver.resolve()
        resolver.ensure_tables(conn, schema)
        updated_count = revalue_bounties(conn, source_factory(schema), current, config.degen_chain_id)

        conn.commit()
        transaction_open = False
        logger.info("updated amount_sort for %d bounties", updated_count)
        return UpdateResult(did_update=True, prices=current, updated_count=updated_count, schema=schema)
    except Exception:
        if transaction_open:
            _rollback_quietly(conn)
        raise
    finally:
        conn.close()


def _rollback_quietly(conn) -> None:
    try:
        conn.rollback()
    except Exception:  # noqa: BLE001
        logger.exception("Rollback failed")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Refresh USD prices and bounty amount_sort values")
    parser.add_argument("--config", type=Path, default=Path("config.yaml"), help="Path to config.yaml")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        load_env(Path.cwd())
        config = load_config(args.config)
        run_update(config.job)
    except Exception:  # noqa: BLE001
        logger.exception("Something went wrong!")
        return 1
    logger.info("finished with code 0")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
