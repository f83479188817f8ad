from arena_core.shared.text.cleaning import (
    clean_prompt_candidate,
    strip_meta_commentary,
    truncate,
)
from arena_core.shared.text.parsing import (
    count_sentences,
    keyword_tokens,
    parse_list_items,
    word_tokens,
)

__all__ = [
    "clean_prompt_candidate",
    "count_sentences",
    "keyword_tokens",
    "parse_list_items",
    "strip_meta_commentary",
    "truncate",
    "word_tokens",
]
