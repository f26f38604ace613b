from typing import Optional

import httpx
from absl import logging

from catbot.exceptions import LookupServiceError

CAT_API_URL = "https://api.thecatapi.com/v1/images/search"


class CatClient:
    def __init__(
        self,
        url: str = CAT_API_URL,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._http_client = http_client

    async def get_random_cat_url(self) -> Optional[str]:
        """Fetch a random cat picture.

        Returns:
            Image URL, or None if the API answered without an image

        Raises:
            LookupServiceError: If the request itself fails
        """
        try:
            if self._http_client is not None:
                response = await self._http_client.get(self._url)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(self._url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logging.error("Error fetching cat: %s", e)
            raise LookupServiceError("thecatapi", str(e)) from e

        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0].get("url") or None
        return None
