"""
Anthropic messages API client (Claude)
"""
from .base import ProviderClient, ProviderResponse, build_system_prompt

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicClient(ProviderClient):
    """Tool use over POST {base_url}/messages"""

    def _call(self, command, tool_definitions, timeout):
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": build_system_prompt(command),
            "messages": [{"role": "user", "content": command.text}],
            "tools": [
                {
                    "name": tool["name"],
                    "description": tool["description"],
                    "input_schema": tool["input_schema"],
                }
                for tool in tool_definitions
            ],
        }
        headers = {
            "x-api-key": self.descriptor.credential,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        body = self._post_json(f"{self.descriptor.base_url.rstrip('/')}/messages", headers, payload, timeout)
        return self._parse(body)

    def _parse(self, body: dict) -> ProviderResponse:
        content = body.get("content")
        if not isinstance(content, list):
            raise self._malformed("no content blocks")

        text = "".join(
            block["text"] for block in content
            if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
        ) or None

        stop_reason = body.get("stop_reason")
        if stop_reason == "end_turn":
            return ProviderResponse(provider=self.name, model=body.get("model") or self.model, text=text)

        tool_calls = [
            {"id": block.get("id"), "name": block.get("name"), "input": block.get("input")}
            for block in content
            if isinstance(block, dict) and block.get("type") == "tool_use"
        ]
        if stop_reason == "tool_use" and not tool_calls:
            raise self._malformed("stop_reason tool_use without tool_use blocks")

        return ProviderResponse(
            provider=self.name,
            model=body.get("model") or self.model,
            tool_calls=tool_calls,
            text=text,
        )
