"""
Service: reduce repeated scoring calls to one representative score.
- `average_score` samples the endpoint N times (default 3) and returns the
  half-up rounded mean of the valid samples, 0 when none are valid.
- With `abort_on_any_invalid_sample` (default) a single negative sample makes
  the whole aggregate 0, discarding samples already collected.
"""
from __future__ import annotations

import logging
from typing import Protocol

from ..engine.llm import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_SAMPLES = 3


class Scorer(Protocol):
    def score(self, text: str, keyword: str) -> int: ...


class ScoreAggregator:
    def __init__(
        self,
        client: Scorer,
        samples: int = DEFAULT_SAMPLES,
        abort_on_any_invalid_sample: bool = True,
    ) -> None:
        self.client = client
        self.samples = samples
        self.abort_on_any_invalid_sample = abort_on_any_invalid_sample

    def average_score(self, text: str, keyword: str) -> int:
        total = 0
        valid_count = 0
        for _ in range(self.samples):
            sample = self.client.score(text, keyword)
            if sample >= 0:
                total += sample
                valid_count += 1
            elif self.abort_on_any_invalid_sample:
                logger.warning("Invalid sample %s for keyword %r, discarding aggregate", sample, keyword)
                return 0
        if valid_count == 0:
            return 0
        return round_half_up(total / valid_count)

    def average_two_fields(self, first: str, second: str, keyword: str) -> int:
        first_score = self.average_score(first, keyword)
        second_score = self.average_score(second, keyword)
        # integer division truncating toward zero
        return int((first_score + second_score) / 2)
