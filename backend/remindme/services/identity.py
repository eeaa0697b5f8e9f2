"""
Client for the remote identity service that verifies session tokens.
"""
import logging
from typing import Any, Dict, Optional

import httpx


logger = logging.getLogger(__name__)


class IdentityService:
    """
    Verifies session tokens against a remote endpoint.

    The token is forwarded as a bearer header. A 200 response carries the
    caller's identity as JSON; any other status, a timeout or a transport
    error counts as unauthenticated.
    """

    def __init__(
        self,
        verify_url: str,
        timeout_seconds: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.verify_url = verify_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def verify(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify a session token.

        Args:
            token: Raw token from the cookie or Authorization header

        Returns:
            Identity dict, or None if the token is not accepted
        """
        if not token:
            return None

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    self.verify_url,
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as exc:
            logger.warning("Identity verification failed: %s", exc)
            return None

        if response.status_code != 200:
            logger.info("Identity service rejected token (status %d)", response.status_code)
            return None

        try:
            identity = response.json()
        except ValueError:
            logger.warning("Identity service returned a non-JSON body")
            return None
        return identity if isinstance(identity, dict) else {"user": identity}
