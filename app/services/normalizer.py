from typing import Optional

from app.errors import EmptyInput, TooLong

DEFAULT_MAX_LENGTH = 12000


def normalize(raw_text: Optional[str], max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Validate text before it is sent to the LLM and return it trimmed.

    The ceiling applies to the text as submitted, so the caller can report
    the same number the client counted.
    """
    if max_length <= 0:
        raise ValueError("max_length must be a positive integer")
    text = (raw_text or "").strip()
    if not text:
        raise EmptyInput()
    if len(raw_text) > max_length:
        raise TooLong(max_length)
    return text
