"""
Gemini client
Native function calling through the google-genai SDK.
"""
import copy
import uuid
from typing import Callable

from google import genai
from google.genai import errors, types

from utils import get_logger
from utils.errors import ErrorKind, ProviderError
from .base import ProviderClient, ProviderResponse, build_system_prompt

logger = get_logger(__name__)


def _sanitize_schema_for_gemini(schema: dict) -> dict:
    """
    Remove unsupported fields from JSON schema for Gemini compatibility.
    Gemini doesn't support: default, examples, $ref, additionalProperties, etc.
    """
    if not isinstance(schema, dict):
        return schema

    UNSUPPORTED_FIELDS = {"default", "examples", "$ref", "additionalProperties", "$schema", "definitions"}

    cleaned = {}
    for key, value in schema.items():
        if key in UNSUPPORTED_FIELDS:
            continue

        if key == "properties" and isinstance(value, dict):
            cleaned[key] = {
                prop_name: _sanitize_schema_for_gemini(prop_schema)
                for prop_name, prop_schema in value.items()
            }
        elif isinstance(value, dict):
            cleaned[key] = _sanitize_schema_for_gemini(value)
        elif isinstance(value, list):
            cleaned[key] = [
                _sanitize_schema_for_gemini(item) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            cleaned[key] = value

    return cleaned


def to_gemini_tools(tool_definitions: list[dict]) -> list[types.Tool]:
    """Convert tool definitions to Gemini's format."""
    function_declarations = [
        types.FunctionDeclaration(
            name=tool["name"],
            description=tool["description"],
            parameters=_sanitize_schema_for_gemini(copy.deepcopy(tool["input_schema"])),
        )
        for tool in tool_definitions
    ]
    return [types.Tool(function_declarations=function_declarations)]


class GeminiClient(ProviderClient):
    """generate_content with automatic function calling turned off"""

    temperature = 0.1

    def __init__(self, descriptor, max_tokens=None, client_factory: Callable[..., genai.Client] | None = None):
        super().__init__(descriptor, max_tokens)
        self._client_factory = client_factory or genai.Client
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = self._client_factory(api_key=self.descriptor.credential)
        return self._client

    def _call(self, command, tool_definitions, timeout):
        config = types.GenerateContentConfig(
            system_instruction=build_system_prompt(command),
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            tools=to_gemini_tools(tool_definitions),
            automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True),
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )
        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=[types.Content(role="user", parts=[types.Part(text=command.text)])],
                config=config,
            )
        except errors.APIError as e:
            raise ProviderError(self.name, self._kind_for_status(e.code), detail=str(e)) from e
        except Exception as e:
            # httpx timeouts surface unwrapped from the SDK
            if "timeout" in type(e).__name__.lower():
                raise ProviderError(self.name, ErrorKind.TIMEOUT, detail=str(e)) from e
            logger.exception(f"{self.name} request failed")
            raise ProviderError(self.name, ErrorKind.PROVIDER_ERROR, detail=str(e)) from e

        return self._parse(response)

    @staticmethod
    def _kind_for_status(code) -> ErrorKind:
        if code in (401, 403):
            return ErrorKind.AUTH_FAILED
        if code == 429:
            return ErrorKind.REMOTE_RATE_LIMITED
        return ErrorKind.PROVIDER_ERROR

    def _parse(self, response) -> ProviderResponse:
        candidates = getattr(response, "candidates", None)
        if not candidates:
            raise self._malformed("no candidates")

        tool_calls = []
        text_parts = []
        for candidate in candidates:
            # Check if content exists before iterating
            if not (candidate.content and candidate.content.parts):
                continue
            for part in candidate.content.parts:
                if part.function_call:
                    fc = part.function_call
                    tool_calls.append({
                        "id": fc.id or f"call_{uuid.uuid4().hex[:12]}",
                        "name": fc.name,
                        "input": dict(fc.args) if fc.args is not None else {},
                    })
                elif part.text:
                    text_parts.append(part.text)

        return ProviderResponse(
            provider=self.name,
            model=self.model,
            tool_calls=tool_calls,
            text="".join(text_parts) or None,
        )
