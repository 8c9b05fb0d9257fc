"""Run a spend-versus-invest simulation from a JSON request document."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from app.config import get_settings
from app.core.logging import setup_logging
from app.schemas import SimulationRequest
from app.services.simulation import run_simulation

logger = logging.getLogger("spend_invest.scripts.run_simulation")


def _read_json(path: Path, label: str) -> Any:
    if not path.exists():
        raise SystemExit(f"{label} file not found: {path}")
    return json.loads(path.read_text())


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Simulate investing a list of expenditures")
    parser.add_argument("request_file", help="Path to a SimulationRequest JSON document")
    parser.add_argument("--target", type=int, default=None, help="Downsample target for chart points")
    parser.add_argument("--items", action="store_true", help="Include per-item breakdowns")
    parser.add_argument(
        "--market-data",
        default=None,
        help='Path to provider payloads: {"prices": {ticker: payload}, "fx": {pair: payload}}',
    )
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)
    logger.info("Starting %s", settings.app_name, extra=settings.dict_for_logging())

    payload = _read_json(Path(args.request_file), "Request")
    request = SimulationRequest.model_validate(payload)
    if args.target is not None:
        request = request.model_copy(update={"downsample_target": args.target})
    if args.items:
        request = request.model_copy(update={"include_items": True})

    price_payloads = fx_payloads = None
    if args.market_data:
        market_data = _read_json(Path(args.market_data), "Market data")
        price_payloads = market_data.get("prices") or {}
        fx_payloads = market_data.get("fx") or {}
        logger.info(
            "Loaded provider payloads for %d tickers and %d currency pairs",
            len(price_payloads),
            len(fx_payloads),
        )

    response = run_simulation(
        request,
        settings,
        price_payloads=price_payloads,
        fx_payloads=fx_payloads,
    )
    json.dump(response.model_dump(mode="json", by_alias=True), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
