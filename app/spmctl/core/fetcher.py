"""Remote manifest retrieval.

Fetches the package manifest over HTTP with httpx. Transport failures and
non-success status codes surface as NetworkError; the body is parsed
separately with spmctl.models.manifest.parse_manifest().
"""

import logging

import httpx

from spmctl.errors import NetworkError

logger = logging.getLogger(__name__)

USER_AGENT = "spmctl (+https://shusmo.io/SPM)"


class ManifestFetcher:
    """Downloads the manifest body from a URL.

    Attributes:
        timeout: Transport timeout in seconds.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: Transport timeout in seconds.
            transport: Optional httpx transport (used to stub the network).
        """
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        """Fetch the raw manifest body.

        Args:
            url: Manifest URL.

        Returns:
            Response body bytes.

        Raises:
            NetworkError: If the request fails or returns a non-2xx status.
        """
        logger.debug("Fetching manifest from %s", url)
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise NetworkError(f"Failed to fetch {url}: {e}") from e
        return response.content
