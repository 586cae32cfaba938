"""
Minimal Discord REST client used to clean up theme announcement messages.
Never raises on HTTP problems: failures are logged and reported as None/False.
"""
import logging

import httpx

LOG = logging.getLogger(__name__)
DISCORD = "[DISCORD]"


class DiscordClient:
    """Talks to a single announcement channel with a bot token."""

    def __init__(
        self,
        token: str,
        channel_id: str,
        api_base: str = "https://discord.com/api/v10",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.channel_id = channel_id
        self._api_base = api_base.rstrip("/")
        self._headers = {"Authorization": f"Bot {token}"}
        self._transport = transport
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._api_base,
            headers=self._headers,
            transport=self._transport,
            timeout=self._timeout,
        )

    def _message_path(self, message_id: str) -> str:
        return f"/channels/{self.channel_id}/messages/{message_id}"

    async def fetch_message(self, message_id: str) -> dict | None:
        """Return the message payload, or None if it does not exist or the request failed."""
        try:
            async with self._client() as client:
                resp = await client.get(self._message_path(message_id))
        except httpx.HTTPError as e:
            LOG.warning("%s fetch_message failed message_id=%s: %s", DISCORD, message_id, e)
            return None
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            LOG.warning(
                "%s fetch_message message_id=%s status=%s body=%s",
                DISCORD,
                message_id,
                resp.status_code,
                resp.text[:200],
            )
            return None
        return resp.json()

    async def delete_message(self, message_id: str) -> bool:
        """Delete the message if it is still in the channel. True only when Discord confirmed."""
        if await self.fetch_message(message_id) is None:
            LOG.info("%s message not found, nothing to delete message_id=%s", DISCORD, message_id)
            return False
        try:
            async with self._client() as client:
                resp = await client.delete(self._message_path(message_id))
        except httpx.HTTPError as e:
            LOG.warning("%s delete_message failed message_id=%s: %s", DISCORD, message_id, e)
            return False
        if resp.status_code not in (200, 204):
            LOG.warning("%s delete_message message_id=%s status=%s", DISCORD, message_id, resp.status_code)
            return False
        return True
