import json
import unittest
from typing import Any, Dict, List

import httpx
from absl.testing import absltest, parameterized

from catbot.calc.calc_client import CalcClient, CalcResult
from catbot.calc.parsing.scenario_parser import ScenarioParser
from catbot.exceptions import CalcServiceError

CALC_LINE = "252+ Atk Garchomp using Earthquake vs 252 HP / 4 Def Toxapex in Sand"


class CalcResultTest(parameterized.TestCase):
    @parameterized.named_parameters(
        ("rolls", [10, 11, 12], [10, 11, 12]),
        ("fixed_damage", 50, [50]),
        ("multi_hit", [[10, 11], [20, 21]], [30, 32]),
        ("no_damage", [], []),
    )
    def test_damage_shapes(self, damage: Any, expected: List[int]) -> None:
        result = CalcResult.model_validate({"description": "x", "damage": damage})
        self.assertEqual(result.damage, expected)

    def test_desc_alias(self) -> None:
        result = CalcResult.model_validate({"desc": "252+ Atk Garchomp ..."})
        self.assertEqual(result.description, "252+ Atk Garchomp ...")
        self.assertEqual(result.damage, [])


class CalcClientTest(unittest.IsolatedAsyncioTestCase, parameterized.TestCase):
    async def asyncSetUp(self) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.request = ScenarioParser().parse(CALC_LINE)

    def _client(self, handler) -> CalcClient:
        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(
                {"url": str(request.url), "body": json.loads(request.content)}
            )
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(record))
        self.addAsyncCleanup(http_client.aclose)
        return CalcClient("http://calc.test/", http_client=http_client)

    async def test_calculate(self) -> None:
        client = self._client(
            lambda request: httpx.Response(
                200,
                json={
                    "description": "252+ Atk Garchomp Earthquake vs. 252 HP / 4 Def "
                    "Toxapex: 120-142 (39.3 - 46.5%)",
                    "damage": [120, 142],
                },
            )
        )

        result = await client.calculate(self.request, generation=9)

        self.assertIn("Toxapex", result.description)
        self.assertEqual(result.damage, [120, 142])
        self.assertLen(self.requests, 1)
        self.assertEqual(self.requests[0]["url"], "http://calc.test/calculate")
        body = self.requests[0]["body"]
        self.assertEqual(body["gen"], 9)
        self.assertEqual(body["move"], "Earthquake")
        self.assertEqual(body["attacker"]["nature"], "Adamant")
        self.assertEqual(body["field"]["weather"], "Sand")

    async def test_generation_is_sent(self) -> None:
        client = self._client(lambda request: httpx.Response(200, json={"desc": "ok"}))
        await client.calculate(self.request, generation=8)
        self.assertEqual(self.requests[0]["body"]["gen"], 8)

    async def test_service_error_message(self) -> None:
        client = self._client(
            lambda request: httpx.Response(400, json={"error": "Unknown move: Earthqake"})
        )
        with self.assertRaises(CalcServiceError) as context:
            await client.calculate(self.request)
        self.assertEqual(context.exception.message, "Unknown move: Earthqake")
        self.assertEqual(context.exception.status_code, 400)

    async def test_service_error_without_body(self) -> None:
        client = self._client(lambda request: httpx.Response(500, json={}))
        with self.assertRaises(CalcServiceError) as context:
            await client.calculate(self.request)
        self.assertEqual(context.exception.message, "HTTP 500")

    async def test_invalid_response(self) -> None:
        client = self._client(lambda request: httpx.Response(200, text="not json"))
        with self.assertRaises(CalcServiceError) as context:
            await client.calculate(self.request)
        self.assertIsNone(context.exception.status_code)

    async def test_missing_description(self) -> None:
        client = self._client(lambda request: httpx.Response(200, json={"damage": [1]}))
        with self.assertRaises(CalcServiceError):
            await client.calculate(self.request)

    async def test_unreachable_service(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        client = self._client(refuse)
        with self.assertRaises(CalcServiceError) as context:
            await client.calculate(self.request)
        self.assertIn("unavailable", context.exception.message)


if __name__ == "__main__":
    absltest.main()
