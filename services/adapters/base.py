"""
Shared adapter interface for upstream AI providers.
"""
import json
from abc import ABC, abstractmethod
from typing import Any

import httpx

from config import Settings
from errors import ConfigurationError, UpstreamError
from utils.logger import app_logger


def decode_error_body(content: bytes) -> Any:
    """Decode an upstream error body as JSON, falling back to raw text."""
    if not content:
        return None
    try:
        return json.loads(content)
    except (ValueError, UnicodeDecodeError):
        return content.decode("utf-8", errors="replace")


class ProviderAdapter(ABC):
    """
    Builds one provider's native request and interprets its responses.

    Adapters are created per request around a request-scoped httpx client;
    they hold no state beyond that request.
    """

    provider_name: str = ""

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client

    @property
    @abstractmethod
    def api_key(self) -> str:
        """Server-held credential for this provider."""

    @abstractmethod
    async def send(self, *args, **kwargs) -> Any:
        """Forward a normalized request upstream and return the provider's result."""

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def ensure_configured(self) -> None:
        if not self.is_configured:
            app_logger.error(f"{self.provider_name} API key not set on the server")
            raise ConfigurationError(self.provider_name)

    def interpret_error(self, response: httpx.Response) -> UpstreamError:
        """Turn a non-success provider response into a client-facing error."""
        details = decode_error_body(response.content)
        return UpstreamError(self.provider_name, response.status_code, details)

    def transport_error(self, exc: Exception) -> UpstreamError:
        """Connection-level failure: no upstream status, so report 500 with the local text."""
        return UpstreamError(self.provider_name, 500, str(exc) or exc.__class__.__name__)

    async def _post(self, url: str, *, json: dict, headers: dict) -> httpx.Response:
        """POST and read the whole body, raising UpstreamError on any failure."""
        self.ensure_configured()
        try:
            response = await self.client.post(url, json=json, headers=headers)
        except httpx.HTTPError as e:
            app_logger.error(f"Error proxying {self.provider_name} request: {e}")
            raise self.transport_error(e) from e

        if response.is_error:
            error = self.interpret_error(response)
            app_logger.error(f"{self.provider_name} API error (status {response.status_code}): {error.details}")
            raise error

        return response
