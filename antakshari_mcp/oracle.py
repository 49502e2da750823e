"""Remote fallback oracle for verses the local corpus cannot resolve.

The engine hands the oracle a request and awaits a result:

    request   {"text", "requiredStartChar", "recentHistory": [{"speaker", "content"}]}
    response  {"valid": true,  "resolvedVerse": {"text", "nextChar"},
                               "continuationVerse": {"text", "nextChar"}}
           or {"valid": false, "reason": "..."}

Any object matching the Oracle protocol can be plugged in. HttpOracle
POSTs the request as JSON to a configured endpoint.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from antakshari_mcp.config import oracle_api_key, oracle_timeout, oracle_url
from antakshari_mcp.corpus import Verse

logger = logging.getLogger(__name__)


class OracleError(Exception):
    """The oracle could not be reached or answered with an invalid shape."""


@dataclass(frozen=True)
class OracleRequest:
    text: str
    required_start_char: str
    recent_history: list[dict] = field(default_factory=list)

    def to_json(self) -> dict:
        return {
            "text": self.text,
            "requiredStartChar": self.required_start_char,
            "recentHistory": [
                {"speaker": h["speaker"], "content": h["content"]}
                for h in self.recent_history
            ],
        }


@dataclass(frozen=True)
class OracleResult:
    valid: bool
    resolved_verse: Verse | None = None
    continuation_verse: Verse | None = None
    reason: str = ""


class Oracle(Protocol):
    async def __call__(self, request: OracleRequest) -> OracleResult: ...


def _parse_verse(data: dict, key: str) -> Verse | None:
    raw = data.get(key)
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise OracleError(f"'{key}' must be an object, got {type(raw).__name__}")
    if not isinstance(raw.get("text"), str):
        raise OracleError(f"'{key}.text' must be a string")
    next_char = raw.get("nextChar")
    if next_char is not None and not (isinstance(next_char, str) and next_char.strip()):
        raise OracleError(f"'{key}.nextChar' must be a non-empty string")
    try:
        return Verse.from_record(raw)
    except ValueError as e:
        raise OracleError(f"Invalid '{key}': {e}") from e


def parse_oracle_response(data: object) -> OracleResult:
    """Validate a decoded oracle response and convert it to an OracleResult.

    Raises OracleError when the payload does not follow the contract.
    """
    if not isinstance(data, dict):
        raise OracleError(f"Oracle response must be an object, got {type(data).__name__}")

    valid = data.get("valid")
    if not isinstance(valid, bool):
        raise OracleError("Oracle response is missing boolean 'valid'")

    if not valid:
        return OracleResult(valid=False, reason=str(data.get("reason") or "Verse was not accepted."))

    resolved = _parse_verse(data, "resolvedVerse")
    if resolved is None:
        raise OracleError("Valid oracle response is missing 'resolvedVerse'")

    return OracleResult(
        valid=True,
        resolved_verse=resolved,
        continuation_verse=_parse_verse(data, "continuationVerse"),
    )


class HttpOracle:
    """POSTs oracle requests as JSON to an HTTP endpoint.

    Args:
        url:       Endpoint receiving the request body.
        api_key:   Bearer token, or empty string if not required.
        timeout:   HTTP timeout in seconds.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def __call__(self, request: OracleRequest) -> OracleResult:
        payload = request.to_json()
        logger.debug("Oracle request: %s", payload)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers(),
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = await client.post(self._url, json=payload)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            raise OracleError(f"Oracle request failed: {e}") from e
        except ValueError as e:
            raise OracleError(f"Oracle returned invalid JSON: {e}") from e

        return parse_oracle_response(data)


def oracle_from_env() -> HttpOracle | None:
    """Build an HttpOracle from ANTAKSHARI_ORACLE_* variables, or None if unset."""
    url = oracle_url()
    if not url:
        return None
    return HttpOracle(url, api_key=oracle_api_key(), timeout=oracle_timeout())
