"""Command-line entry point: one-off analysis or the HTTP API."""

import argparse
import asyncio
import json
import signal
import sys

from loguru import logger

from config.settings import settings
from src.analysis.factory import build_pipeline
from src.api.server import run_api_server
from src.utils.logger import setup_logger


async def analyze(text: str, *, allow_paid: bool, as_json: bool) -> int:
    pipeline = build_pipeline(settings)
    try:
        result = await pipeline.run_analysis(text, allow_quota_limited_sources=allow_paid)
    finally:
        await pipeline.close()

    if as_json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print(result.response)
    return 0 if result.success else 1


async def serve(host: str | None, port: int | None) -> None:
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    server_task = asyncio.create_task(run_api_server(host, port))
    done, pending = await asyncio.wait(
        [server_task, asyncio.create_task(shutdown_event.wait())],
        return_when=asyncio.FIRST_COMPLETED,
    )
    for task in pending:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
    logger.info("Shutdown complete")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="token-risk-radar", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("analyze", help="Analyze a free-text query or token address")
    run.add_argument("text", nargs="+", help="Query text, e.g. 'is this a rug? <address>'")
    run.add_argument("--no-paid", action="store_true", help="Skip quota-limited sources")
    run.add_argument("--json", action="store_true", help="Print the structured result as JSON")

    srv = sub.add_parser("serve", help="Run the HTTP API")
    srv.add_argument("--host", default=None)
    srv.add_argument("--port", type=int, default=None)
    return parser


def cli(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(json_logs=settings.log_json, level=settings.log_level, log_file=args.command == "serve")

    if args.command == "analyze":
        allow_paid = settings.allow_quota_limited_sources and not args.no_paid
        return asyncio.run(analyze(" ".join(args.text), allow_paid=allow_paid, as_json=args.json))

    asyncio.run(serve(args.host, args.port))
    return 0


if __name__ == "__main__":
    sys.exit(cli())
