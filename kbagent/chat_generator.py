#!/usr/bin/env python3
import logging
from typing import List, Optional

import httpx
import openai
from openai import OpenAI
from pydantic import BaseModel, ValidationError

from .config import DEFAULT_BASE_URL, DEFAULT_MODEL, DEFAULT_TIMEOUT, Settings
from .errors import ApiError, AuthError, EmptyResponseError, NetworkError, ParseError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "Ты ИИ-ассистент техподдержки. Отвечай строго по предоставленной базе знаний."


class ChatMessage(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    model: str
    messages: List[ChatMessage]


class ReplyMessage(BaseModel):
    content: Optional[str] = None


class Choice(BaseModel):
    message: ReplyMessage


class ChatResponse(BaseModel):
    choices: List[Choice]


class DeepSeekClient:
    """Blocking chat-completion client: one POST per question, no retries."""

    def __init__(self, api_key: Optional[str], base_url: str = DEFAULT_BASE_URL,
                 model: str = DEFAULT_MODEL, timeout: float = DEFAULT_TIMEOUT,
                 verify_ssl: bool = True, transport: Optional[httpx.BaseTransport] = None):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self.verify_ssl = verify_ssl

        if not verify_ssl:
            logger.warning(
                f"TLS certificate verification is DISABLED for {base_url} "
                "(DEEPSEEK_INSECURE_SKIP_VERIFY / --insecure)"
            )

        self.http_client = httpx.Client(verify=verify_ssl, timeout=timeout, transport=transport)
        self._client: Optional[OpenAI] = None

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None):
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            model=settings.model,
            timeout=settings.timeout,
            verify_ssl=settings.verify_ssl,
            transport=transport,
        )

    @property
    def client(self) -> OpenAI:
        # Created on first use so a missing key never reaches the SDK
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
                http_client=self.http_client,
            )
        return self._client

    def build_request(self, prompt: str) -> ChatRequest:
        return ChatRequest(
            model=self.model,
            messages=[
                ChatMessage(role="system", content=SYSTEM_PROMPT),
                ChatMessage(role="user", content=prompt),
            ],
        )

    def ask(self, prompt: str) -> str:
        """Send the prompt and return the text of the first choice"""
        if not self.api_key or not self.api_key.strip():
            raise AuthError("DEEPSEEK_API_KEY is not set. Add it to your environment or .env file.")

        request = self.build_request(prompt)
        logger.debug(f"POST {self.base_url}/chat/completions model={self.model} prompt={len(prompt)} chars")

        try:
            raw = self.client.chat.completions.with_raw_response.create(**request.model_dump())
        except openai.APIStatusError as e:
            raise ApiError(e.status_code, e.response.text) from e
        except openai.APIConnectionError as e:
            # Timeouts land here too (APITimeoutError)
            reason = e.__cause__ or e
            raise NetworkError(f"Request to {self.base_url} failed: {reason}") from e

        response = raw.http_response
        if response.status_code != 200:
            raise ApiError(response.status_code, response.text)

        return self.parse_reply(response.text)

    @staticmethod
    def parse_reply(body: str) -> str:
        try:
            parsed = ChatResponse.model_validate_json(body)
        except ValidationError as e:
            raise ParseError(f"Unexpected API response: {e}") from e

        if not parsed.choices:
            raise EmptyResponseError("Empty API response: no choices returned")

        return parsed.choices[0].message.content or ""

    def close(self):
        self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
