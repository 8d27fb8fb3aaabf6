"""Text helpers: Russian noun inflection and entity-safe truncation."""


def _truncated_remainder(n: int, base: int) -> int:
    """Remainder that keeps the sign of ``n`` (truncated division)."""
    remainder = abs(n) % base
    return -remainder if n < 0 else remainder


def inflect(n: int, forms) -> str:
    """Return ``n`` followed by the noun form for one, few or many.

    ``forms`` holds three forms, e.g. ("урок", "урока", "уроков").
    """
    one, few, many = forms[0], forms[1], forms[2]
    last_two = _truncated_remainder(n, 100)
    last = _truncated_remainder(n, 10)
    if 10 < last_two < 15:
        word = many
    elif last == 1:
        word = one
    elif 1 < last < 5:
        word = few
    else:
        word = many
    return f"{n} {word}"


def safely_truncate(text: str, max_length: int) -> str:
    """Shorten ``text`` to at most ``max_length`` UTF-8 bytes, ending with "...".

    The cut never splits a character or leaves a dangling XML entity.
    """
    encoded = text.encode("utf-8")
    if len(encoded) <= max_length:
        return text
    if max_length < 3:
        raise ValueError(f"max_length must be at least 3, got {max_length}")

    head = encoded[: max_length - 3]
    while True:
        try:
            truncated = head.decode("utf-8")
            break
        except UnicodeDecodeError:
            head = head[:-1]

    last_amp = truncated.rfind("&")
    if last_amp != -1 and ";" not in truncated[last_amp:]:
        truncated = truncated[:last_amp]

    return truncated + "..."