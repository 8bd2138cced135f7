"""
OpenAI-compatible chat completions client (Groq and friends)
"""
from .base import ProviderClient, ProviderResponse, build_system_prompt


class OpenAICompatibleClient(ProviderClient):
    """Function calling over POST {base_url}/chat/completions"""

    temperature = 0.1

    def _call(self, command, tool_definitions, timeout):
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": build_system_prompt(command)},
                {"role": "user", "content": command.text},
            ],
            "tools": [
                {
                    "type": "function",
                    "function": {
                        "name": tool["name"],
                        "description": tool["description"],
                        "parameters": tool["input_schema"],
                    },
                }
                for tool in tool_definitions
            ],
            "tool_choice": "auto",
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.descriptor.credential}",
            "Content-Type": "application/json",
        }
        body = self._post_json(f"{self.descriptor.base_url.rstrip('/')}/chat/completions", headers, payload, timeout)
        return self._parse(body)

    def _parse(self, body: dict) -> ProviderResponse:
        choices = body.get("choices")
        if not isinstance(choices, list) or not choices:
            raise self._malformed("no choices")
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise self._malformed("choice has no message")

        tool_calls = []
        for call in message.get("tool_calls") or []:
            if not isinstance(call, dict):
                raise self._malformed("tool call is not an object")
            function = call.get("function")
            if not isinstance(function, dict):
                raise self._malformed("tool call has no function object")
            # `arguments` stays a JSON string; the validator parses it
            tool_calls.append({
                "id": call.get("id"),
                "name": function.get("name"),
                "input": function.get("arguments"),
            })

        return ProviderResponse(
            provider=self.name,
            model=body.get("model") or self.model,
            tool_calls=tool_calls,
            text=message.get("content"),
        )
