"""Tests for the tool functions and the closed tool registry."""

import asyncio
import itertools
import threading

import httpx
import pytest

from chat_relay import InvalidArgumentsError, PriceFetchError, ToolExecutionError, UnknownToolError
from chat_relay.tools import PriceClient, ToolKind, ToolRegistry, add, is_prime, usd_price

from helpers import failing_price_client, price_client


class TestArithmetic:
    """Sum and primality."""

    def test_sum_returns_exact_sum(self):
        values = [-7, -1.5, 0, 0.25, 1, 42, 1234, 10**12]
        for a, b in itertools.product(values, repeat=2):
            assert add(a, b) == a + b

    def test_below_two_is_never_prime(self):
        for n in (-13, -2, -1, 0, 1, 1.5):
            assert is_prime(n) is False

    def test_small_primes(self):
        for n in (2, 3, 5, 7, 11, 13):
            assert is_prime(n) is True

    def test_small_composites(self):
        for n in (4, 6, 8, 9, 10, 12):
            assert is_prime(n) is False

    def test_square_of_prime_is_detected(self):
        # divisor equal to the integer square root must be tried
        assert is_prime(49) is False
        assert is_prime(9973 * 9973) is False
        assert is_prime(9973) is True

    def test_floats(self):
        assert is_prime(7.0) is True
        assert is_prime(8.0) is False
        assert is_prime(7.5) is False

    def test_repeated_calls_agree(self):
        first = [is_prime(n) for n in range(50)]
        for _ in range(3):
            assert [is_prime(n) for n in range(50)] == first


class TestPriceClient:
    """CoinGecko-style lookups through httpx.MockTransport."""

    def test_returns_payload_and_sends_query(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"bitcoin": {"usd": 101.5}})

        client = price_client(handler)
        payload = asyncio.run(client.get_price("bitcoin"))

        assert payload == {"bitcoin": {"usd": 101.5}}
        assert seen[0].url.params["ids"] == "bitcoin"
        assert seen[0].url.params["vs_currencies"] == "usd"

    def test_error_status_raises(self):
        with pytest.raises(PriceFetchError) as excinfo:
            asyncio.run(failing_price_client(500).get_price("bitcoin"))
        assert excinfo.value.coin == "bitcoin"
        assert "HTTP 500" in str(excinfo.value)

    def test_non_json_body_raises(self):
        client = price_client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(PriceFetchError):
            asyncio.run(client.get_price("bitcoin"))

    def test_non_object_body_raises(self):
        client = price_client(lambda request: httpx.Response(200, json=[1, 2]))
        with pytest.raises(PriceFetchError):
            asyncio.run(client.get_price("bitcoin"))

    def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(PriceFetchError):
            asyncio.run(price_client(handler).get_price("bitcoin"))

    def test_injected_client_is_not_closed(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
        asyncio.run(PriceClient(client=client).aclose())
        assert not client.is_closed

    def test_usd_price(self):
        assert usd_price({"bitcoin": {"usd": 5}}, "bitcoin") == 5
        assert usd_price({}, "bitcoin") is None
        assert usd_price({"bitcoin": {}}, "bitcoin") is None
        assert usd_price({"bitcoin": {"usd": "5"}}, "bitcoin") is None


class TestToolRegistry:
    """Catalogue rendering, validation and dispatch."""

    def test_catalogue_lists_the_three_tools_in_order(self, registry):
        names = [entry["function"]["name"] for entry in registry.catalogue()]
        assert names == ["sum", "check_prime", "get_crypto_price"]

    def test_catalogue_entry_shape(self, registry):
        entry = registry.catalogue()[0]
        assert entry["type"] == "function"
        params = entry["function"]["parameters"]
        assert params["type"] == "object"
        assert params["properties"] == {"num1": {"type": "number"}, "num2": {"type": "number"}}
        assert params["required"] == ["num1", "num2"]

    def test_coin_parameter_is_described(self, registry):
        spec = registry.resolve("get_crypto_price")
        coin = spec.as_function()["function"]["parameters"]["properties"]["coin"]
        assert coin["type"] == "string"
        assert "bitcoin" in coin["description"]

    def test_list_specs(self, registry):
        specs = registry.list_specs()
        assert [s.kind for s in specs] == list(ToolKind)
        assert specs[1].required == frozenset({"number"})

    def test_invoke_sum(self, registry):
        assert asyncio.run(registry.invoke("sum", {"num1": 1234, "num2": 5678})) == 6912

    def test_invoke_check_prime(self, registry):
        assert asyncio.run(registry.invoke("check_prime", {"number": 9973})) is True

    def test_invoke_price(self, registry):
        payload = asyncio.run(registry.invoke("get_crypto_price", {"coin": "ethereum"}))
        assert payload == {"ethereum": {"usd": 3500}}

    def test_unknown_tool(self, registry):
        with pytest.raises(UnknownToolError) as excinfo:
            asyncio.run(registry.invoke("check_prime_number", {"number": 3}))
        assert excinfo.value.tool_name == "check_prime_number"

    @pytest.mark.parametrize(
        "name, arguments",
        [
            ("sum", {"num1": 1}),
            ("sum", {"num1": 1, "num2": "2"}),
            ("sum", {"num1": True, "num2": 2}),
            ("sum", {"num1": 1, "num2": 2, "num3": 3}),
            ("check_prime", []),
            ("get_crypto_price", {"coin": 7}),
        ],
    )
    def test_invalid_arguments(self, registry, name, arguments):
        with pytest.raises(InvalidArgumentsError):
            asyncio.run(registry.invoke(name, arguments))

    def test_price_failure_keeps_its_type(self):
        registry = ToolRegistry(failing_price_client())
        with pytest.raises(PriceFetchError):
            asyncio.run(registry.invoke("get_crypto_price", {"coin": "bitcoin"}))

    def test_unexpected_failure_becomes_execution_error(self, registry, monkeypatch):
        async def boom(coin):
            raise KeyError(coin)

        monkeypatch.setattr(registry.price_client, "get_price", boom)
        with pytest.raises(ToolExecutionError) as excinfo:
            asyncio.run(registry.invoke("get_crypto_price", {"coin": "bitcoin"}))
        assert isinstance(excinfo.value.__cause__, KeyError)

    def test_prime_check_runs_off_the_event_loop(self, registry, monkeypatch):
        threads = []

        def recording_is_prime(number):
            threads.append(threading.get_ident())
            return is_prime(number)

        monkeypatch.setattr("chat_relay.tools.registry.is_prime", recording_is_prime)

        assert asyncio.run(registry.invoke("check_prime", {"number": 9973})) is True
        assert threads and threads[0] != threading.get_ident()
