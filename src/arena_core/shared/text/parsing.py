import re

_WORD_PATTERN = re.compile(r"[a-z0-9']+")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_LIST_MARKER = re.compile(r"^(?:[-*•]|\d{1,2}[.)])\s*")

STOPWORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "can", "do",
        "for", "from", "how", "i", "in", "is", "it", "me", "my", "of",
        "on", "or", "please", "so", "that", "the", "this", "to", "was",
        "what", "when", "where", "which", "who", "why", "will", "with",
        "you", "your",
    }
)


def word_tokens(text: str) -> list[str]:
    return _WORD_PATTERN.findall(text.lower())


def keyword_tokens(text: str, min_length: int = 4) -> set[str]:
    return {
        token
        for token in word_tokens(text)
        if len(token) >= min_length and token not in STOPWORDS
    }


def count_sentences(text: str) -> int:
    return sum(1 for part in _SENTENCE_SPLIT.split(text) if part.strip())


def parse_list_items(text: str, min_length: int = 5) -> list[str]:
    items = []
    for raw_line in text.strip().split("\n"):
        line = raw_line.strip()
        if not line or not _LIST_MARKER.match(line):
            continue
        item = _LIST_MARKER.sub("", line, count=1).strip()
        if len(item) >= min_length:
            items.append(item)
    return items
