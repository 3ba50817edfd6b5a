import pytest

from chat_relay.tools.registry import ToolRegistry

from helpers import price_client


@pytest.fixture
def registry():
    """Registry whose price index knows bitcoin and ethereum."""
    return ToolRegistry(price_client(prices={"bitcoin": 67000.5, "ethereum": 3500}))
