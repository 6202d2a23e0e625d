"""
Grid carbon-intensity sources.

Every source returns a reading for any region and never raises: missing
credentials, unmapped regions, provider errors and malformed payloads all
degrade to the region's static default intensity.
"""

import math

import httpx

from greenops.planning.carbon import CarbonIntensitySource, CarbonReading, ReadingSource
from greenops.planning.regions import Region
from greenops.utils.logging import get_logger

logger = get_logger(__name__)


class StaticCarbonSource(CarbonIntensitySource):
    """Always returns the catalog default intensity."""

    async def get_reading(self, region: Region) -> CarbonReading:
        return CarbonReading.fallback(region)


class ElectricityMapsCarbonSource(CarbonIntensitySource):
    """
    Live carbon intensity from the Electricity Maps v3 API.

    Uses ``/carbon-intensity/latest?zone=<zone>`` authenticated with the
    ``auth-token`` header. Regions without a zone, and every request when no
    API key is configured, fall back to static values.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = "https://api.electricitymaps.com/v3",
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the Electricity Maps source.

        Args:
            api_key: Electricity Maps auth token
            base_url: API base URL
            timeout_seconds: Per-request timeout
            client: Optional preconfigured HTTP client (not closed by us)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None

        if not api_key:
            logger.warning("Electricity Maps API key not set, using static carbon intensities")

    @property
    def is_live(self) -> bool:
        return bool(self.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def get_reading(self, region: Region) -> CarbonReading:
        if not self.api_key or not region.zone:
            return CarbonReading.fallback(region)

        try:
            client = await self._get_client()
            response = await client.get(
                f"{self.base_url}/carbon-intensity/latest",
                params={"zone": region.zone},
                headers={"auth-token": self.api_key},
                timeout=self.timeout_seconds,
            )

            if not response.is_success:
                logger.warning(
                    "Electricity Maps API error",
                    region=region.id,
                    zone=region.zone,
                    status_code=response.status_code,
                    body=response.text[:200],
                )
                return CarbonReading.fallback(region)

            value = response.json().get("carbonIntensity")

        except Exception as e:
            logger.error(
                "Error calling Electricity Maps",
                region=region.id,
                zone=region.zone,
                error=str(e),
            )
            return CarbonReading.fallback(region)

        # bool is an int subclass but never a valid reading; json also parses NaN and Infinity
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or not math.isfinite(value)
            or value < 0
        ):
            logger.warning(
                "Electricity Maps returned no usable carbonIntensity",
                value=repr(value),
                region=region.id,
                zone=region.zone,
            )
            return CarbonReading.fallback(region)

        return CarbonReading(region_id=region.id, value=float(value), source=ReadingSource.LIVE)
