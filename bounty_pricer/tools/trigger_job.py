from __future__ import annotations

import argparse
import logging
from pathlib import Path

from bounty_pricer.api.trigger import TriggerClient
from bounty_pricer.config import load_config, load_env, require_trigger

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Invoke the deployed price update job")
    parser.add_argument("--config", type=Path, default=Path("config.yaml"), help="Path to config.yaml")
    parser.add_argument("--path", default=None, help="Override the job endpoint path")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        load_env(Path.cwd())
        settings = require_trigger(load_config(args.config).trigger)
        client = TriggerClient(
            base_url=settings.base_url,
            api_key=settings.api_key,
            secret=settings.secret,
            timeout_s=settings.timeout_s,
        )
        path = args.path or settings.path
        result = client.trigger(path)
    except Exception:  # noqa: BLE001
        logger.exception("Trigger failed")
        return 1
    logger.info("Triggered %s: %s", path, result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
