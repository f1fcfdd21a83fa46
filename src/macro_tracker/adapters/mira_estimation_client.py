"""HTTP client for the hosted food-tracker estimation flow."""

from dataclasses import dataclass

import httpx

from macro_tracker.services.estimation import EstimationClient


@dataclass
class HttpxMiraEstimationClient(EstimationClient):
    """HTTPX-backed client for the estimation flow."""

    api_key: str
    url: str
    version: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 60.0

    @classmethod
    def create(
        cls, api_key: str, url: str, version: str, timeout_seconds: float = 60.0
    ) -> "HttpxMiraEstimationClient":
        """Create an estimation client with a managed httpx session."""
        return cls(
            api_key=api_key,
            url=url,
            version=version,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def estimate(self, description: str) -> str:
        """Send a meal description and return the markdown result."""
        response = await self.http_client.post(
            self.url,
            params={"version": self.version},
            headers={"miraauthorization": self.api_key},
            json={"input": {"diet": description}},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        payload = response.json()
        result = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(result, str):
            raise RuntimeError("Estimation flow returned no result")
        return result

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
