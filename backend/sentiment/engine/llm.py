"""
Engine: client for the external scoring endpoint.
- POSTs {"prompt": ...} built from the configured template.
- Extracts the outermost {...} from the reply (the model may wrap JSON in prose)
  and reads `positivity_score` from it.
- Malformed replies degrade to a 0 sample; only transport failures raise.
"""
from __future__ import annotations

import logging
import math
from types import TracebackType

import httpx
from pydantic import BaseModel, Field, ValidationError

from ..core.config import LLMConfig
from ..core.errors import ParseError, TransportError
from .prompt import render

logger = logging.getLogger(__name__)

HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json; charset=UTF-8",
}


class SentimentResponse(BaseModel):
    positivity_score: float = Field(default=0.0, allow_inf_nan=False)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def extract_json_object(body: str) -> str | None:
    first = body.find("{")
    last = body.rfind("}")
    if first == -1 or last == -1 or last <= first:
        return None
    return body[first:last + 1]


def parse_positivity_score(candidate: str) -> int:
    try:
        parsed = SentimentResponse.model_validate_json(candidate)
    except ValidationError as e:
        raise ParseError(f"Failed to parse extracted JSON: {candidate}") from e
    return round_half_up(parsed.positivity_score)


class ScoreClient:
    def __init__(self, cfg: LLMConfig, template: str, transport: httpx.BaseTransport | None = None) -> None:
        self.url = cfg.url
        self.template = template
        self._client = httpx.Client(timeout=cfg.timeout_s, headers=HEADERS, transport=transport)

    def __enter__(self) -> ScoreClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _post(self, prompt: str) -> str:
        try:
            r = self._client.post(self.url, json={"prompt": prompt})
        except httpx.HTTPError as e:
            raise TransportError(f"Error calling sentiment analysis API at {self.url}: {e}") from e
        if r.is_error:
            logger.warning("Sentiment API returned HTTP %s", r.status_code)
        return r.text

    def score(self, text: str, keyword: str) -> int:
        """Return one sentiment sample for `text` toward `keyword`.

        Raises TransportError when the endpoint cannot be reached.
        """
        body = self._post(render(self.template, keyword, text))
        logger.debug("Raw response from LLM: %s", body)

        candidate = extract_json_object(body)
        if candidate is None:
            logger.warning("Could not find a valid JSON object in the response")
            return 0
        try:
            return parse_positivity_score(candidate)
        except ParseError as e:
            logger.warning("%s", e)
            return 0
