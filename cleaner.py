# cleaner.py
import json
import logging
import re
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# ```json ... ``` or ``` ... ``` around the whole reply
LEADING_FENCE = re.compile(r"\A```(?:json)?", re.IGNORECASE)
TRAILING_FENCE = re.compile(r"```\Z")


def clean_json_output(text: str) -> str:
    """Strip Markdown code fences from a model reply."""
    cleaned = text.strip()
    cleaned = LEADING_FENCE.sub("", cleaned)
    cleaned = TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def parse_model_output(text: str, model: Type[M]) -> Optional[M]:
    """Parse a model reply into ``model``.

    Returns None when the cleaned text is not JSON or does not match the
    record; callers then relay the raw reply instead.
    """
    cleaned = clean_json_output(text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.warning("Failed to parse %s JSON. Returning raw text.", model.__name__)
        return None
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning("Model output does not match %s: %s", model.__name__, e.error_count())
        return None
