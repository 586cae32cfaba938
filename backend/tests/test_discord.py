import httpx

from themebot.services.discord import DiscordClient


def _client(handler) -> DiscordClient:
    return DiscordClient(
        "bot-token",
        "chan-1",
        api_base="https://discord.test/api/v10",
        transport=httpx.MockTransport(handler),
    )


async def test_delete_message_fetches_then_deletes():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.headers["Authorization"]))
        if request.method == "GET":
            return httpx.Response(200, json={"id": "m-1", "channel_id": "chan-1"})
        return httpx.Response(204)

    assert await _client(handler).delete_message("m-1") is True
    assert seen == [
        ("GET", "/api/v10/channels/chan-1/messages/m-1", "Bot bot-token"),
        ("DELETE", "/api/v10/channels/chan-1/messages/m-1", "Bot bot-token"),
    ]


async def test_missing_message_is_not_deleted():
    methods = []

    def handler(request: httpx.Request) -> httpx.Response:
        methods.append(request.method)
        return httpx.Response(404, json={"message": "Unknown Message"})

    client = _client(handler)

    assert await client.fetch_message("m-1") is None
    assert await client.delete_message("m-1") is False
    assert "DELETE" not in methods


async def test_forbidden_delete_reports_false():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"id": "m-1"})
        return httpx.Response(403, json={"message": "Missing Permissions"})

    assert await _client(handler).delete_message("m-1") is False


async def test_network_error_reports_false():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert await _client(handler).delete_message("m-1") is False
