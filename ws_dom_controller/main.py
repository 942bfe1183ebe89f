"""
Command-line entry point.

`bridge` (default) connects to a controller and drives the browser over CDP;
`controller` runs the demo controller server with an interactive prompt.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
from collections.abc import Sequence

from .config import BridgeConfig
from .controller import ControllerServer
from .gateway import create_bridge

logger = logging.getLogger("ws_dom")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ws-dom-controller", description="Relay websocket commands into browser tabs.")
    parser.add_argument("--log-level", default="INFO", help="logging level (default: INFO)")
    sub = parser.add_subparsers(dest="command")

    bridge = sub.add_parser("bridge", help="connect to a controller and execute its commands")
    bridge.add_argument("--url", help="controller websocket URL (env WS_DOM_URL)")
    bridge.add_argument("--cdp-port", type=int, help="remote debugging port (env WS_DOM_CDP_PORT)")
    bridge.add_argument("--mode", choices=["launch", "attach"], help="launch a browser or attach to one")
    bridge.add_argument("--headless", action="store_true", default=None, help="launch the browser headless")

    controller = sub.add_parser("controller", help="run the demo controller server")
    controller.add_argument("--host", help="bind host (env WS_DOM_CONTROLLER_HOST)")
    controller.add_argument("--port", type=int, help="bind port (env WS_DOM_CONTROLLER_PORT)")
    controller.add_argument("--no-demo", action="store_true", help="do not send the demo script on connect")
    controller.add_argument("--no-stdin", action="store_true", help="do not read commands from stdin")
    return parser


def apply_overrides(config: BridgeConfig, args: argparse.Namespace) -> BridgeConfig:
    if getattr(args, "url", None):
        config.controller_url = args.url
    if getattr(args, "cdp_port", None):
        config.cdp_port = int(args.cdp_port)
    if getattr(args, "mode", None):
        config.mode = BridgeConfig.normalize_mode(args.mode)
    if getattr(args, "headless", None):
        config.headless = True
    if getattr(args, "host", None):
        config.controller_host = args.host
    if getattr(args, "port", None):
        config.controller_port = int(args.port)
    return config


async def _run_bridge(config: BridgeConfig) -> None:
    client = create_bridge(config)
    try:
        await client.run()
    finally:
        await client.stop()


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    config = apply_overrides(BridgeConfig.from_env(), args)

    with contextlib.suppress(KeyboardInterrupt):
        if args.command == "controller":
            server = ControllerServer(config.controller_host, config.controller_port, demo=not args.no_demo)
            asyncio.run(server.serve_forever(interactive=not args.no_stdin))
        else:
            logger.info("bridge -> %s (browser mode=%s, cdp port=%s)", config.controller_url, config.mode, config.cdp_port)
            asyncio.run(_run_bridge(config))


if __name__ == "__main__":
    main()
