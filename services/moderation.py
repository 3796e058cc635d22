"""
Safety pre-filter for image prompts.
Classifies a prompt through a chat completion and rewrites safe prompts for generation.
"""
import json
import re
from typing import Optional

from errors import ModerationUnavailable, RelayError, UnsafePromptError
from models.relay_models import ModerationStatus, ModerationVerdict, RelayStage
from services.adapters.openai_adapter import OpenAIChatAdapter
from utils.constants import DEFAULT_REFUSAL_MESSAGE, MODERATION_SYSTEM_PROMPT
from utils.logger import app_logger


class ModerationService:
    """Service for screening image prompts before generation."""

    CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

    @staticmethod
    def parse_verdict(text: Optional[str]) -> ModerationVerdict:
        """
        Parse the model's structured reply.

        Anything other than a JSON object with a known status raises
        ModerationUnavailable; a malformed reply never counts as unsafe.
        """
        if not isinstance(text, str) or not text.strip():
            raise ModerationUnavailable("Empty moderation reply")

        cleaned = ModerationService.CODE_FENCE.sub("", text.strip())
        try:
            data = json.loads(cleaned)
        except ValueError as e:
            raise ModerationUnavailable(f"Moderation reply is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ModerationUnavailable("Moderation reply is not a JSON object")

        status = data.get("status")
        try:
            status = ModerationStatus(str(status).strip().lower()) if status is not None else None
        except ValueError:
            status = None
        if status is None:
            raise ModerationUnavailable(f"Moderation reply has no usable status: {data.get('status')!r}")

        if status is ModerationStatus.SAFE:
            optimized = str(data.get("optimized_prompt") or "").strip()
            return ModerationVerdict(status=status, optimized_prompt=optimized or None)

        message = str(data.get("response") or "").strip()
        return ModerationVerdict(status=status, user_message=message or None)

    @staticmethod
    async def evaluate(prompt: str, adapter: OpenAIChatAdapter, model: str) -> ModerationVerdict:
        """Run one classification call and parse its verdict."""
        messages = [
            {"role": "system", "content": MODERATION_SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]
        try:
            data = await adapter.complete(
                messages,
                model=model,
                response_format={"type": "json_object"},
                temperature=0
            )
        except RelayError as e:
            raise ModerationUnavailable(f"Moderation call failed: {e}") from e

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ModerationUnavailable("Moderation response has no message content") from e

        return ModerationService.parse_verdict(text)

    @staticmethod
    def refusal_message(verdict: ModerationVerdict, prompt: str) -> str:
        """Client-visible refusal; falls back to a generic text if the model echoed the prompt."""
        message = verdict.user_message
        if not message or prompt.strip().lower() in message.lower():
            return DEFAULT_REFUSAL_MESSAGE
        return message

    @staticmethod
    async def screen_prompt(prompt: str, adapter: OpenAIChatAdapter, model: str) -> str:
        """
        Return the prompt to generate with.

        Skips moderation when its credential is missing and continues with the
        original prompt when moderation is unavailable (fail-open). Raises
        UnsafePromptError on an unsafe verdict.
        """
        if not adapter.is_configured:
            app_logger.warning("Moderation skipped: OpenAI API key not set, using original prompt")
            return prompt

        app_logger.debug(f"Image request stage: {RelayStage.MODERATING.value}")
        try:
            verdict = await ModerationService.evaluate(prompt, adapter, model)
        except ModerationUnavailable as e:
            app_logger.warning(f"Moderation unavailable, using original prompt: {e}")
            return prompt

        if not verdict.is_safe:
            app_logger.info("Image prompt rejected by moderation")
            raise UnsafePromptError(ModerationService.refusal_message(verdict, prompt))

        if verdict.optimized_prompt:
            app_logger.info(f"Image prompt optimized by moderation ({len(verdict.optimized_prompt)} chars)")
            return verdict.optimized_prompt
        return prompt
