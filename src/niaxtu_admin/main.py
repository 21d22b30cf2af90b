from __future__ import annotations

import argparse
import asyncio
import logging

import uvicorn

from niaxtu_admin.api.app import create_app
from niaxtu_admin.seed import seed_demo_data
from niaxtu_admin.settings import load_settings
from niaxtu_admin.storage.memory_store import DocumentStore

LOGGER = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the Niaxtu admin API on an in-memory document store.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--seed", action="store_true", help="Load demo sectors, types and complaints at startup.")
    args = parser.parse_args()

    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    store = DocumentStore()
    if args.seed:
        asyncio.run(seed_demo_data(store))
    LOGGER.info("niaxtu_admin started: env=%s seed=%s", settings.app_env, args.seed)

    app = create_app(store=store, settings=settings)
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
