import re

_PUNCTUATION_RE = re.compile(r"[.,!?]")


def _normalize_words(text: str) -> list:
    return _PUNCTUATION_RE.sub("", text.lower()).split(" ")


def calculate_accuracy(original: str, spoken: str) -> int:
    """Percentage of target words that the spoken text has at the same position."""
    original_words = _normalize_words(original)
    spoken_words = _normalize_words(spoken)

    match_count = 0
    for i, word in enumerate(original_words):
        if i < len(spoken_words) and spoken_words[i] == word:
            match_count += 1

    return round(match_count / len(original_words) * 100)
