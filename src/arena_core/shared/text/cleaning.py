import re
from typing import Any

_META_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^\s*(?:sure|okay|alright|certainly|absolutely)(?:[,!\s]+|$)",
        r"^\s*(?:here\s+is|here\'s)\s+",
        r"^\s*(?:let me|i will|i\'ll)\s+(?:provide|give|present)",
        r"^\s*(?:as requested|as you asked)",
        r"^\s*(?:below is|following is)",
    )
]

# Applied in order to the extracted candidate prompt
_CANDIDATE_CLEANUPS = [
    (re.compile(r"^[\"']+|[\"']+$"), ""),
    (re.compile(r"^\[|\]$"), ""),
    (
        re.compile(
            r"^(?:here's|here is|the improved|my improved|improved version:)\s*",
            re.IGNORECASE,
        ),
        "",
    ),
    (re.compile(r"^(?:prompt:|version:)\s*", re.IGNORECASE), ""),
    (re.compile(r"^\*\*|\*\*$"), ""),
    (re.compile(r"^(?:-\s+|\*\s+|\d+\.\s+)"), ""),
]


def truncate(text: str, limit: int = 80) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


def strip_meta_commentary(text: str, logger: Any | None = None) -> str:
    """Drop leading chatter such as "Sure! Here's..." before the real content."""
    if not text or not text.strip():
        return text

    lines = text.split("\n")
    removed: list[str] = []
    while lines:
        stripped = lines[0].strip()
        if not stripped:
            lines.pop(0)
            continue
        if not any(p.match(stripped) for p in _META_PATTERNS):
            break
        # Keep the remainder of a line like "Here's the plan: do X"
        _, sep, rest = stripped.partition(":")
        if sep and rest.strip():
            lines[0] = rest.strip()
            removed.append(stripped[: len(stripped) - len(rest)])
            break
        removed.append(lines.pop(0).strip())

    cleaned = "\n".join(lines).strip()
    if removed and logger:
        logger.debug(f"Stripped meta-commentary: {removed[:3]}")
    if not cleaned:
        if logger:
            logger.warning(
                "Meta-commentary filter removed all content, returning original"
            )
        return text.strip()
    return cleaned


def clean_prompt_candidate(text: str) -> str:
    cleaned = text.strip()
    for pattern, replacement in _CANDIDATE_CLEANUPS:
        cleaned = pattern.sub(replacement, cleaned).strip()
    return cleaned
