"""
OpenAI Chat Completions adapter.
"""
import httpx

from errors import UpstreamError, UpstreamProtocolError
from models.relay_models import NormalizedChatRequest
from services.adapters.base import ProviderAdapter, decode_error_body
from utils.logger import app_logger


class OpenAIChatAdapter(ProviderAdapter):
    """Streams chat completions; also serves one-shot JSON completions for moderation."""

    provider_name = "OpenAI"

    @property
    def api_key(self) -> str:
        return self.settings.OPENAI_API_KEY

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}"
        }

    async def send(self, request: NormalizedChatRequest) -> httpx.Response:
        """
        Open a streaming completion.

        Returns the upstream response with its body unread so the relay can
        pipe it. Error statuses are read in full and raised before the client
        sees any headers.
        """
        self.ensure_configured()
        payload = {
            "model": request.model,
            "messages": request.turns,
            "stream": True
        }
        upstream_request = self.client.build_request(
            "POST", self.settings.OPENAI_CHAT_URL, json=payload, headers=self._headers()
        )

        try:
            response = await self.client.send(upstream_request, stream=True)
        except httpx.HTTPError as e:
            app_logger.error(f"Error proxying OpenAI request: {e}")
            raise self.transport_error(e) from e

        if response.is_error:
            try:
                await response.aread()
            finally:
                await response.aclose()
            error = self.interpret_error(response)
            app_logger.error(f"OpenAI API error (status {response.status_code}): {error.details}")
            raise error

        app_logger.info(f"OpenAI stream opened for model {request.model} ({len(request.turns)} turns)")
        return response

    async def complete(self, messages: list, model: str, **options) -> dict:
        """Non-streaming completion returning the decoded JSON body."""
        payload = {"model": model, "messages": messages, **options}
        response = await self._post(self.settings.OPENAI_CHAT_URL, json=payload, headers=self._headers())
        try:
            data = response.json()
        except ValueError:
            raise UpstreamProtocolError("OpenAI returned a non-JSON response", details=response.text)
        if not isinstance(data, dict):
            raise UpstreamProtocolError("OpenAI returned an unexpected response", details=data)
        return data

    def interpret_error(self, response: httpx.Response) -> UpstreamError:
        details = decode_error_body(response.content)
        message = None
        if isinstance(details, dict) and isinstance(details.get("error"), dict):
            message = details["error"].get("message")
        return UpstreamError(self.provider_name, response.status_code, details, message)
