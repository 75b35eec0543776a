import asyncio
import logging
from typing import Any, Dict, List, Optional

from src.application.ports import ImagePart, LLMPort, Part, TextPart
from src.infrastructure.config import Settings


logger = logging.getLogger(__name__)


def to_content_chunks(parts: List[Part]) -> List[dict]:
    chunks = []
    for part in parts:
        if isinstance(part, TextPart):
            chunks.append({"type": "text", "text": part.text})
        elif isinstance(part, ImagePart):
            chunks.append({
                "type": "image_url",
                "image_url": f"data:{part.mime_type};base64,{part.data_base64}",
            })
        else:
            raise TypeError(f"Unsupported request part: {part!r}")
    return chunks


def build_messages(system: Optional[str], parts: List[Part]) -> List[dict]:
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": to_content_chunks(parts)})
    return messages


def build_response_format(schema_name: str, schema: Dict[str, Any]) -> dict:
    return {
        "type": "json_schema",
        "json_schema": {"name": schema_name, "schema": schema, "strict": True},
    }


class MistralLLMAdapter(LLMPort):
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self._client = None
        self._model = self.settings.mistral_model
        self._init_client()

    def _init_client(self):
        api_key = self.settings.mistral_api_key
        if not api_key:
            logger.error("Mistral API key is missing.")
            self._client = None
            return
        try:
            from mistralai import Mistral
            kwargs = {"api_key": api_key, "timeout_ms": self.settings.mistral_timeout_ms}
            if self.settings.mistral_server_url:
                kwargs["server_url"] = self.settings.mistral_server_url
            self._client = Mistral(**kwargs)
        except Exception as e:
            logger.exception("Failed to initialize Mistral client: %s", e)
            self._client = None

    async def generate_json(
        self,
        system: Optional[str],
        parts: List[Part],
        schema_name: str,
        schema: Dict[str, Any],
    ) -> str:
        if not self._client:
            raise RuntimeError("Mistral client not initialized (missing API key or import error)")
        # The sync client is not bound to an event loop; callers may use a
        # fresh asyncio.run() per request.
        return await asyncio.to_thread(self._complete, system, parts, schema_name, schema)

    def _complete(
        self,
        system: Optional[str],
        parts: List[Part],
        schema_name: str,
        schema: Dict[str, Any],
    ) -> str:
        try:
            response = self._client.chat.complete(
                model=self._model,
                messages=build_messages(system, parts),
                response_format=build_response_format(schema_name, schema),
            )
            # Return the assistant content
            content = response.choices[0].message.content
            return content
        except Exception as e:
            logger.exception("Mistral chat call failed: %s", e)
            raise
