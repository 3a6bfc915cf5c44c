"""Thin wrapper around the Anthropic client: retries and JSON extraction."""

import json
import random
import re
import threading
import time

import anthropic

from .config import AI_BACKOFF_BASE, AI_BACKOFF_MAX, AI_MAX_RETRIES, AI_TIMEOUT, MODEL, api_key
from .errors import AIRequestError, AIResponseError, SlidecastError

_print_lock = threading.Lock()

_RETRYABLE = (
    anthropic.APIConnectionError,   # includes APITimeoutError
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


def _log(msg: str) -> None:
    with _print_lock:
        print(msg)


def get_client(timeout: float = AI_TIMEOUT) -> anthropic.Anthropic:
    key = api_key()
    if not key:
        raise SlidecastError("ANTHROPIC_API_KEY environment variable not set")
    # Retries are handled by ask() so backoff is the same for every caller.
    return anthropic.Anthropic(api_key=key, timeout=timeout, max_retries=0)


def backoff_delay(attempt: int, base: float = AI_BACKOFF_BASE, cap: float = AI_BACKOFF_MAX) -> float:
    """Exponential backoff with full jitter for the given 1-based attempt."""
    return random.uniform(0, min(cap, base * (2 ** (attempt - 1))))


def ask(
    client: anthropic.Anthropic,
    content: str | list,
    max_tokens: int,
    retries: int = AI_MAX_RETRIES,
    label: str = "claude",
) -> str:
    """Send one user message and return the reply text."""
    retries = max(retries, 1)
    for attempt in range(1, retries + 1):
        try:
            message = client.messages.create(
                model=MODEL,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": content}],
            )
            return "".join(
                block.text for block in message.content if getattr(block, "type", "") == "text"
            ).strip()
        except _RETRYABLE as e:
            if attempt == retries:
                raise AIRequestError(f"{label}: {type(e).__name__} after {retries} attempt(s): {e}") from e
            delay = backoff_delay(attempt)
            _log(f"[{label}] {type(e).__name__} (attempt {attempt}/{retries}), retrying in {delay:.1f}s")
            time.sleep(delay)
        except anthropic.APIError as e:
            raise AIRequestError(f"{label}: {type(e).__name__}: {e}") from e


def extract_json(text: str, opening: str = "{") -> object:
    """Extract a JSON value from a reply, tolerating surrounding prose or fences."""
    # 1. Try parsing the whole response directly
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # 2. Extract content inside ```...``` fences
    fenced = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if fenced:
        try:
            return json.loads(fenced.group(1).strip())
        except json.JSONDecodeError:
            pass

    # 3. Find the outermost object/array in the response
    closing = "}" if opening == "{" else "]"
    start, end = text.find(opening), text.rfind(closing)
    if start != -1 and end > start:
        try:
            return json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            pass

    raise AIResponseError(f"Could not parse model reply as JSON: {text[:200]!r}")
