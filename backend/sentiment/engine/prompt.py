from __future__ import annotations

import re

from ..core.errors import ConfigError

_PLACEHOLDER = re.compile(r"\{(keyword|text)\}")


def render(template: str, keyword: str, text: str) -> str:
    """Fill `{keyword}` and `{text}` in the prompt template.

    Single pass: inserted values are never scanned for placeholders again.
    """
    if not template:
        raise ConfigError("Prompt template is not configured")
    values = {"keyword": keyword, "text": text}
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], template)
