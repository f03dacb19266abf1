import httpx

from scanner.errors import TransportError

DEFAULT_TIMEOUT = 30.0
# "0x" is what nodes return for an address without deployed code
EMPTY_CODE_LEN = 2


async def rpc_call(client: httpx.AsyncClient, rpc_url: str, method: str, params: list, timeout: float | None = None):
    if not rpc_url:
        raise TransportError(rpc_url, "endpoint not configured")

    payload = {"jsonrpc": "2.0", "method": method, "params": params, "id": 1}
    try:
        r = await client.post(rpc_url, json=payload, timeout=timeout or DEFAULT_TIMEOUT)
        r.raise_for_status()
        data = r.json()
    except httpx.HTTPStatusError as e:
        raise TransportError(rpc_url, f"{method} returned HTTP {e.response.status_code}") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise TransportError(rpc_url, f"{method} failed: {e!r}") from e
    except ValueError as e:
        raise TransportError(rpc_url, f"{method} returned malformed JSON") from e

    if not isinstance(data, dict):
        raise TransportError(rpc_url, f"{method} returned unexpected payload")
    if "error" in data:
        raise TransportError(rpc_url, f"{method} error: {data['error']}")
    if "result" not in data:
        raise TransportError(rpc_url, f"{method} response has no result")
    return data["result"]


class ClassificationClient:
    """Asks a node whether an address has deployed code.

    One ``eth_getCode`` call per ``classify``; retries belong to the dispatcher.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_TIMEOUT):
        self.client = client
        self.timeout = timeout

    async def classify(self, address: str, endpoint: str) -> bool:
        code = await rpc_call(self.client, endpoint, "eth_getCode", [address, "latest"], timeout=self.timeout)
        if not isinstance(code, str):
            raise TransportError(endpoint, f"eth_getCode result is not a string: {code!r}")
        return len(code) > EMPTY_CODE_LEN
