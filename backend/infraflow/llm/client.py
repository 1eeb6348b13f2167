# backend/infraflow/llm/client.py
from typing import Optional

import requests

from infraflow.config import settings
from infraflow.llm.response import ModifyError


class LLMClient:
    """Thin client for an Ollama-compatible /api/chat endpoint"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self.model = model or settings.ollama_model
        self.timeout = timeout or settings.llm_timeout

    def chat(self, system: str, user: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "stream": False,
            "format": "json",
            "options": {"temperature": 0.0},
        }

        try:
            response = requests.post(
                f"{self.base_url}/api/chat",
                json=payload,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise ModifyError.timeout() from e
        except requests.RequestException as e:
            raise ModifyError.api_error(detail=str(e)) from e

        if response.status_code >= 400:
            raise ModifyError.api_error(response.status_code, response.text[:200])

        try:
            return response.json()["message"]["content"]
        except (ValueError, KeyError, TypeError) as e:
            raise ModifyError.invalid_response(f"unexpected chat payload: {e}") from e
