"""Chat-completions client that turns a descriptor into a category label."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, Optional

import requests
from pydantic import ValidationError

from ai_file_organize.config.models import ClassifierSettings

from .errors import MalformedResponse, TransportError
from .models import (
    FALLBACK_LABEL,
    CategoryPayload,
    ChatCompletionEnvelope,
    ChatMessage,
    ChatRequest,
    ClassificationResult,
    Matched,
    Unmatched,
)

LOGGER = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def build_prompt(descriptor: str, categories: Iterable[str]) -> str:
    """Compose the user instruction for a single descriptor.

    Args:
        descriptor: Textual summary of the entry.
        categories: Closed set of labels the model may return.

    Returns:
        str: Instruction asking for exactly one label as JSON.
    """
    known = json.dumps(list(categories), ensure_ascii=False)
    return (
        "Choose the single most suitable type from the list below and return only JSON "
        'for that type, for example {"category": "movie"}. '
        f"Known types: {known}. "
        f"Entry information: {descriptor}"
    )


def parse_label(body: Any) -> ClassificationResult:
    """Extract the category from a decoded response body.

    Args:
        body: JSON-decoded response body.

    Returns:
        ClassificationResult: ``Matched`` with the label, or ``Unmatched`` when
        any part of the nested structure is missing or malformed.

    Raises:
        MalformedResponse: If the body is not a JSON object.
    """
    if not isinstance(body, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(body).__name__}.")

    try:
        envelope = ChatCompletionEnvelope.model_validate(body)
    except ValidationError as exc:
        return Unmatched(f"unexpected envelope shape: {exc.error_count()} error(s)")

    if not envelope.choices:
        return Unmatched("no choices in response")
    message = envelope.choices[0].message
    if message is None or message.content is None:
        return Unmatched("first choice has no message content")

    content = message.content.strip()
    fenced = _CODE_FENCE.match(content)
    if fenced:
        content = fenced.group(1)

    try:
        payload = CategoryPayload.model_validate_json(content)
    except ValidationError:
        return Unmatched("message content is not a category object")

    category = (payload.category or "").strip()
    if not category:
        return Unmatched("category field missing")
    return Matched(category)


class ClassifierClient:
    """Send descriptors to a chat-completions endpoint and read back a label."""

    def __init__(
        self,
        settings: ClassifierSettings,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def classify(self, descriptor: str, categories: Iterable[str]) -> str:
        """Return the label chosen for the descriptor.

        Ambiguous answers resolve to ``others`` instead of raising.

        Args:
            descriptor: Textual summary of the entry.
            categories: Labels the model is allowed to choose from.

        Returns:
            str: The category label, or ``others``.

        Raises:
            TransportError: On network failure or a non-success HTTP status.
            MalformedResponse: If the response body is not a JSON object.
        """
        request = ChatRequest(
            model=self._settings.model,
            messages=[
                ChatMessage(role="system", content=self._settings.system_prompt),
                ChatMessage(role="user", content=build_prompt(descriptor, categories)),
            ],
        )
        body = self._post(request)
        result = parse_label(body)
        if isinstance(result, Unmatched):
            LOGGER.info("Falling back to %r: %s", FALLBACK_LABEL, result.reason)
        return result.label

    def close(self) -> None:
        self._session.close()

    def _post(self, request: ChatRequest) -> Any:
        LOGGER.debug("POST %s model=%s", self._settings.endpoint, request.model)
        headers = {"Authorization": f"Bearer {self._settings.api_key or ''}"}
        try:
            response = self._session.post(
                self._settings.endpoint,
                json=request.model_dump(mode="json", exclude_none=True),
                headers=headers,
                timeout=self._settings.timeout_seconds,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise TransportError(f"Classifier returned HTTP {status}", status_code=status) from exc
        except requests.RequestException as exc:
            raise TransportError(f"Classifier request failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse(f"Response body is not valid JSON: {exc}") from exc


__all__ = ["ClassifierClient", "build_prompt", "parse_label"]
