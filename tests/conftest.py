from __future__ import annotations

import pytest

from ws_dom_controller.config import BridgeConfig
from ws_dom_controller.server.types import HandlerContext
from ws_dom_controller.tabs import TabResolver
from ws_dom_controller.tools.base import PageActuator

from .fakes import FakeTabHost


@pytest.fixture()
def host() -> FakeTabHost:
    return FakeTabHost()


@pytest.fixture()
def config() -> BridgeConfig:
    return BridgeConfig(nav_timeout=1.0, reconnect_delay=0.05)


@pytest.fixture()
def ctx(config: BridgeConfig, host: FakeTabHost) -> HandlerContext:
    return HandlerContext(config=config, host=host, resolver=TabResolver(host), actuator=PageActuator(host))
