"""Cliente HTTP base com retry para chamadas externas."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP.

    timeout_seconds vale por tentativa; max_retries não conta a primeira.
    """

    timeout_seconds: float = 5.0
    max_retries: int = 3
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 10.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis.

    status_code e body vêm preenchidos quando o servidor respondeu
    com status retryable até esgotar as tentativas.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
        *,
        body: str = "",
        is_timeout: bool = False,
        retry_after_seconds: float = 0.0,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable
        self.body = body
        self.is_timeout = is_timeout
        self.retry_after_seconds = retry_after_seconds


class HttpClient:
    """Cliente HTTP simples para chamadas externas.

    Args:
        config: Timeouts, retries e headers padrão.
        transport: Transport httpx alternativo (ex: MockTransport em testes).
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport

    async def post(
        self,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("POST", url, json=json, headers=headers)

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("GET", url, params=params, headers=headers)

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Executa requisição com retry em 429, 5xx, timeout e falha de conexão.

        Raises:
            HttpError: Tentativas esgotadas ou erro de transporte.
        """
        merged_headers = {**self._config.default_headers, **(headers or {})}
        for attempt in range(self._config.max_retries + 1):
            try:
                async with httpx.AsyncClient(
                    verify=self._config.verify_ssl,
                    transport=self._transport,
                ) as client:
                    response = await client.request(
                        method,
                        url,
                        json=json,
                        params=params,
                        headers=merged_headers,
                        timeout=self._config.timeout_seconds,
                    )
                if response.status_code == 429 or response.status_code >= 500:
                    raise HttpError(
                        "http_retryable_status",
                        status_code=response.status_code,
                        is_retryable=True,
                        body=response.text,
                        retry_after_seconds=_retry_after_seconds(response),
                    )
                return response
            except HttpError as exc:
                if not exc.is_retryable or attempt >= self._config.max_retries:
                    raise
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                    floor_seconds=exc.retry_after_seconds,
                )
            except httpx.TimeoutException as exc:
                if attempt >= self._config.max_retries:
                    raise HttpError(
                        "http_timeout", is_retryable=True, is_timeout=True
                    ) from exc
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                )
            except httpx.ConnectError as exc:
                if attempt >= self._config.max_retries:
                    raise HttpError("http_connection_error", is_retryable=True) from exc
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                )
            except httpx.HTTPError as exc:
                raise HttpError("http_transport_error") from exc
        raise HttpError("http_retry_exhausted", is_retryable=True)


def _retry_after_seconds(response: httpx.Response) -> float:
    """Retry-After em segundos (429 do Slack); 0 se ausente ou inválido."""
    try:
        return max(float(response.headers.get("retry-after", 0)), 0.0)
    except ValueError:
        return 0.0


async def _backoff_sleep(
    attempt: int,
    base: float,
    max_seconds: float,
    floor_seconds: float = 0.0,
) -> None:
    # Retry-After é piso do backoff
    backoff = max(min((2**attempt) * base, max_seconds), floor_seconds)
    logger.info("http_backoff", extra={"attempt": attempt, "backoff_seconds": backoff})
    await asyncio.sleep(backoff)
