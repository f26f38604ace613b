"""HTTP client for the damage calculation service.

The service wraps the Showdown damage calculator: it takes the attacker,
defender, move and field options produced by ScenarioRequest.to_calc_payload()
and answers with the calculator's description line.
"""

from typing import Any, List, Optional

import httpx
from absl import logging
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from catbot.calc.schema.scenario_request import ScenarioRequest
from catbot.exceptions import CalcServiceError

DEFAULT_CALC_SERVICE_URL = "http://127.0.0.1:3000"
CALCULATE_PATH = "/calculate"


class CalcResult(BaseModel):
    description: str = Field(
        validation_alias=AliasChoices("description", "desc"),
        description="Human readable result, e.g. '252+ Atk Garchomp Earthquake vs. ...'",
    )
    damage: List[int] = Field(
        default_factory=list, description="Damage rolls, lowest to highest"
    )

    @field_validator("damage", mode="before")
    @classmethod
    def _flatten_damage(cls, value: Any) -> Any:
        # The calculator reports a bare int for fixed damage and nested lists
        # for multi-hit moves.
        if isinstance(value, int):
            return [value]
        if isinstance(value, list) and value and isinstance(value[0], list):
            return [sum(rolls) for rolls in zip(*value)]
        return value


class CalcClient:
    """Sends scenario requests to the damage calculation service."""

    def __init__(
        self,
        base_url: str = DEFAULT_CALC_SERVICE_URL,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the calc service
            timeout: Request timeout in seconds, used when no http_client is given
            http_client: Shared client to send requests with; a short-lived
                client is created per call if omitted
        """
        self._url = base_url.rstrip("/") + CALCULATE_PATH
        self._timeout = timeout
        self._http_client = http_client

    async def calculate(
        self, request: ScenarioRequest, generation: int = 9
    ) -> CalcResult:
        """Run a damage calc.

        Args:
            request: Parsed scenario
            generation: Game generation to calculate in

        Returns:
            CalcResult with the description and damage rolls

        Raises:
            CalcServiceError: If the service is unreachable, rejects the
                request (e.g. unknown species or move) or answers garbage
        """
        payload = request.to_calc_payload(generation)
        logging.debug("Calc request: %s", payload)

        try:
            if self._http_client is not None:
                response = await self._http_client.post(self._url, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._url, json=payload)
        except httpx.HTTPError as e:
            logging.error("Calc service request to %s failed: %s", self._url, e)
            raise CalcServiceError(f"Calc service unavailable: {e}") from e

        if response.status_code != 200:
            raise CalcServiceError(
                self._error_message(response), status_code=response.status_code
            )

        try:
            return CalcResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logging.error("Invalid calc service response: %s", response.text[:200])
            raise CalcServiceError(f"Invalid calc service response: {e}") from e

    def _error_message(self, response: httpx.Response) -> str:
        """Extract the service's error text from a failed response."""
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"HTTP {response.status_code}"
