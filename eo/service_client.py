"""HTTP client for an Ollama-compatible generation service.

Two endpoints are used: ``GET /api/tags`` to check the service is up and
list installed models, and ``POST /api/generate`` for a single, non-streamed
completion.
"""

from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3:8b-instruct-q4_0"
TAGS_TIMEOUT = 5


class ServiceError(Exception):
    """Base class for generation service failures."""


class ServiceUnavailableError(ServiceError):
    """The service is not running or the URL is wrong."""

    def __init__(self, url: str, detail: str = ""):
        self.url = url
        self.detail = detail
        super().__init__("Ollama service not started or invalid url")


class ServiceResponseError(ServiceError):
    """The service answered with a body that could not be understood."""


class GenerationError(ServiceError):
    """A generation request failed; the message is shown to the user."""


class GenerationClient:
    """Thin synchronous client for one generation service.

    Args:
        base_url: Service root, e.g. ``http://localhost:11434``.
        timeout: Seconds to wait for a generation to complete.
        session: Optional :class:`requests.Session` to reuse.
    """

    def __init__(self, base_url: str, timeout: int = 120, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def list_models(self) -> list[str]:
        """Return the names of the installed models.

        Raises:
            ServiceUnavailableError: If the service cannot be reached or
                does not answer 200.
            ServiceResponseError: If the model list is not valid JSON.
        """
        url = f"{self.base_url}/api/tags"
        try:
            response = self._session.get(url, timeout=TAGS_TIMEOUT)
        except requests.exceptions.RequestException as e:
            logger.debug("GET %s failed: %s", url, e)
            raise ServiceUnavailableError(self.base_url, str(e)) from e

        if response.status_code != 200:
            logger.debug("GET %s returned %d", url, response.status_code)
            raise ServiceUnavailableError(self.base_url, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ServiceResponseError(f"Error parsing models data: {e}") from e

        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            models = []
        names = [m["name"] for m in models if isinstance(m, dict) and m.get("name")]
        logger.debug("Service at %s has %d models", self.base_url, len(names))
        return names

    @staticmethod
    def pick_model(models: list[str], preferred: str | None = None) -> str:
        """Choose the model to generate with.

        An explicitly requested model wins, then the first installed one,
        then :data:`DEFAULT_MODEL`.
        """
        if preferred:
            return preferred
        if models:
            return models[0]
        return DEFAULT_MODEL

    def generate(self, prompt: str, model: str) -> str:
        """Run one non-streamed generation and return the reply text.

        Raises:
            GenerationError: On transport failure, a non-200 answer, an
                undecodable body, or a body without a ``response`` field.
        """
        url = f"{self.base_url}/api/generate"
        payload = {"model": model, "prompt": prompt, "stream": False}
        logger.debug("POST %s model=%s prompt=%d chars", url, model, len(prompt))

        try:
            response = self._session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("HTTP request failed: %s", e)
            raise GenerationError("AI server issue") from e

        if response.status_code != 200:
            logger.error(
                "HTTP request failed: Status %d, Body: %s",
                response.status_code, response.text,
            )
            raise GenerationError("AI server issue")

        try:
            data = response.json()
        except ValueError as e:
            logger.error("JSON parsing error: %s, Body: %s", e, response.text)
            raise GenerationError("Invalid AI response") from e

        if not isinstance(data, dict) or "response" not in data:
            logger.error("AI response missing 'response' field: %s", response.text)
            raise GenerationError("No 'response' in AI output")

        reply = data["response"]
        if not isinstance(reply, str):
            logger.error("AI response field is not text: %r", reply)
            raise GenerationError("Invalid AI response")
        return reply
