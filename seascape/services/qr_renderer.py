"""QR code image rendering via an external renderer."""

import logging
from urllib.parse import quote

import httpx

from seascape.config import settings
from seascape.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "qr-renderer"


class QRRenderer:
    """Build and fetch QR code images for booking tokens.

    The token is the only thing encoded; the image carries no other booking
    data.
    """

    def __init__(
        self,
        url_template: str | None = None,
        size: int | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url_template = url_template or settings.qr_renderer_url_template
        self.size = size or settings.qr_image_size
        self.timeout = timeout
        self._transport = transport

    def image_url(self, token: str, size: int | None = None) -> str:
        return self.url_template.format(size=size or self.size, data=quote(token, safe=""))

    async def render(self, token: str, size: int | None = None) -> bytes:
        """Fetch the PNG for a token.

        Raises:
            ExternalServiceError: Renderer unreachable or answered with an error
        """
        url = self.image_url(token, size)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"QR render failed: {e}")
            raise ExternalServiceError(SERVICE_NAME, str(e))
        return response.content


qr_renderer = QRRenderer()
