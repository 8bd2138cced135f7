"""
Provider client base
Shared request plumbing and error mapping for the LLM backends.

Every client returns raw tool calls as {"id", "name", "input"} dicts and
leaves structural checking to the validator. Clients never retry.
"""
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

import requests

from config import settings, ProviderDescriptor
from utils import get_logger
from utils.errors import ErrorKind, ProviderError

logger = get_logger(__name__)


SYSTEM_PROMPT = """You are a design assistant that edits a shared canvas by calling tools.

Rules:
- Always act through tool calls; never describe changes in prose instead of making them.
- Coordinates are pixels from the top-left corner of the canvas.
- To create several identical objects use one create_shape call with `count`, not many calls.
- For UI elements (button group, card, navbar, login form, sidebar) use one create_component call.
- Colors are hex strings like #3B82F6 or common color names.
- When the user refers to "this", "these", "it" or "the selection", use the selected object ids below.
"""


@dataclass
class ProviderResponse:
    """What a provider returned: raw tool calls plus any free text"""
    provider: str
    model: str
    tool_calls: list[dict] = field(default_factory=list)
    text: Optional[str] = None


def build_system_prompt(command) -> str:
    """System prompt with the canvas context the model needs to resolve references"""
    parts = [SYSTEM_PROMPT]
    selected = list(getattr(command, "selected_ids", ()) or ())
    if selected:
        parts.append(f"Selected object ids: {', '.join(selected)}")
    else:
        parts.append("No objects are selected.")
    color = getattr(command, "current_color", None)
    if color:
        parts.append(f"Current color: {color}. Use it when the user doesn't name a color.")
    return "\n".join(parts)


class ProviderClient(ABC):
    """One LLM backend. Subclasses translate to and from the backend's wire format."""

    def __init__(self, descriptor: ProviderDescriptor, max_tokens: int | None = None):
        self.descriptor = descriptor
        self.max_tokens = max_tokens or settings.PROVIDER_MAX_TOKENS

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def model(self) -> str:
        return self.descriptor.model

    def call(self, command, tool_definitions: list[dict], timeout: float | None = None) -> ProviderResponse:
        """
        Send one command to the provider.
        Raises ProviderError; a missing credential fails before any network I/O.
        """
        if not self.descriptor.has_credential:
            raise ProviderError(self.name, ErrorKind.MISSING_CREDENTIAL, f"{self.name}: no API key configured")
        timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS
        logger.info(f"Calling {self.name} ({self.model}) with {len(tool_definitions)} tools")
        response = self._call(command, tool_definitions, timeout)
        logger.info(f"{self.name} returned {len(response.tool_calls)} tool calls")
        return response

    @abstractmethod
    def _call(self, command, tool_definitions: list[dict], timeout: float) -> ProviderResponse:
        ...

    def _post_json(self, url: str, headers: dict, payload: dict, timeout: float) -> dict:
        """POST and decode JSON, mapping transport and HTTP failures to ProviderError kinds"""
        try:
            response = requests.post(url, headers=headers, json=payload, timeout=timeout)
        except requests.exceptions.Timeout as e:
            raise ProviderError(self.name, ErrorKind.TIMEOUT, detail=str(e)) from e
        except requests.exceptions.RequestException as e:
            logger.exception(f"{self.name} request failed")
            raise ProviderError(self.name, ErrorKind.PROVIDER_ERROR, detail=str(e)) from e

        status = response.status_code
        if status in (401, 403):
            raise ProviderError(self.name, ErrorKind.AUTH_FAILED, detail=response.text[:500])
        if status == 429:
            raise ProviderError(self.name, ErrorKind.REMOTE_RATE_LIMITED, detail=response.text[:500])
        if status >= 400:
            logger.error(f"{self.name} returned HTTP {status}: {response.text[:200]}")
            raise ProviderError(self.name, ErrorKind.PROVIDER_ERROR, detail=f"HTTP {status}")

        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise ProviderError(self.name, ErrorKind.MALFORMED_PROVIDER_RESPONSE, detail=str(e)) from e
        if not isinstance(body, dict):
            raise ProviderError(self.name, ErrorKind.MALFORMED_PROVIDER_RESPONSE, detail="body is not an object")
        return body

    def _malformed(self, detail: str) -> ProviderError:
        logger.warning(f"{self.name} malformed response: {detail}")
        return ProviderError(self.name, ErrorKind.MALFORMED_PROVIDER_RESPONSE, detail=detail)
