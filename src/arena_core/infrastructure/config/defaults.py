"""Default configuration values for Arena.

Kept as Python dictionaries so they ship inside the package regardless of
how it is installed. Prices are in cents per 1K tokens.
"""

import copy
from typing import Any


def _model(
    model_name: str,
    display_name: str,
    provider: str,
    description: str,
    strengths: list[str],
    context_window: int,
    max_completion_tokens: int,
    price: float,
    speed: str = "medium",
    quality: str = "high",
    premium: bool = False,
) -> dict[str, Any]:
    return {
        "provider": provider,
        "model_name": model_name,
        "display_name": display_name,
        "description": description,
        "available": True,
        "premium": premium,
        "strengths": strengths,
        "context_window": context_window,
        "max_completion_tokens": max_completion_tokens,
        "price_per_1k_tokens": price,
        "speed": speed,
        "quality": quality,
    }


# Groq-hosted models, keyed by a short name usable on the command line
MODELS: dict[str, dict[str, Any]] = {
    "llama-8b": _model(
        "llama-3.1-8b-instant",
        "Llama 3.1 8B Instant",
        "Meta",
        "Ultra-fast responses with excellent quality",
        ["speed", "general", "coding"],
        131072,
        8192,
        0.05,
        speed="fast",
    ),
    "llama-70b": _model(
        "llama-3.3-70b-versatile",
        "Llama 3.3 70B Versatile",
        "Meta",
        "Large model with exceptional reasoning capabilities",
        ["reasoning", "analysis", "creative"],
        131072,
        32768,
        0.27,
    ),
    "llama-guard": _model(
        "meta-llama/llama-guard-4-12b",
        "Llama Guard 4 12B",
        "Meta",
        "Safety-focused model with strong content moderation",
        ["safety", "moderation", "analysis"],
        8192,
        4096,
        0.1,
        speed="fast",
        quality="medium",
    ),
    "llama-maverick": _model(
        "meta-llama/llama-4-maverick-17b-128e-instruct",
        "Llama 4 Maverick 17B",
        "Meta",
        "Latest Llama 4 with enhanced instruction following",
        ["instruction", "creative", "technical"],
        131072,
        8192,
        0.2,
        speed="fast",
        premium=True,
    ),
    "llama-scout": _model(
        "meta-llama/llama-4-scout-17b-16e-instruct",
        "Llama 4 Scout 17B",
        "Meta",
        "Optimized for exploration and discovery tasks",
        ["research", "analysis", "exploration"],
        131072,
        8192,
        0.2,
        speed="fast",
        premium=True,
    ),
    "prompt-guard-22m": _model(
        "meta-llama/llama-prompt-guard-2-22m",
        "Llama Prompt Guard 2 22M",
        "Meta",
        "Lightweight prompt injection detection model",
        ["safety", "security", "analysis"],
        4096,
        1024,
        0.02,
        speed="fast",
        quality="medium",
    ),
    "prompt-guard-86m": _model(
        "meta-llama/llama-prompt-guard-2-86m",
        "Llama Prompt Guard 2 86M",
        "Meta",
        "Enhanced prompt injection detection with better accuracy",
        ["safety", "security", "analysis"],
        4096,
        1024,
        0.03,
        speed="fast",
        quality="medium",
    ),
    "gpt-oss-120b": _model(
        "openai/gpt-oss-120b",
        "GPT OSS 120B",
        "OpenAI",
        "Large open-source GPT model with strong performance",
        ["reasoning", "creative", "general"],
        32768,
        16384,
        0.5,
        speed="slow",
        premium=True,
    ),
    "gpt-oss-20b": _model(
        "openai/gpt-oss-20b",
        "GPT OSS 20B",
        "OpenAI",
        "Efficient open-source GPT model for general tasks",
        ["general", "balanced", "efficient"],
        16384,
        8192,
        0.15,
        quality="medium",
    ),
    "deepseek-r1": _model(
        "deepseek-r1-distill-llama-70b",
        "DeepSeek R1 Distill 70B",
        "DeepSeek/Meta",
        "Advanced reasoning model with mathematical capabilities",
        ["math", "technical", "reasoning"],
        65536,
        16384,
        0.27,
    ),
    "kimi-k2": _model(
        "moonshotai/kimi-k2-instruct",
        "Kimi K2 Instruct",
        "Moonshot AI",
        "Advanced instruction-following model with long context",
        ["instruction", "reasoning", "creative"],
        200000,
        32768,
        0.3,
        premium=True,
    ),
    "qwen3-32b": _model(
        "qwen/qwen3-32b",
        "Qwen 3 32B",
        "Alibaba Cloud",
        "Multilingual powerhouse with strong reasoning capabilities",
        ["multilingual", "reasoning", "creative"],
        32768,
        16384,
        0.27,
    ),
}

RETRY: dict[str, Any] = {
    "max_attempts": 5,
    "initial_delay": 1.0,
    "max_delay": 30.0,
    "jitter": 1.0,
    "timeout": 45.0,
}

CONVERGENCE: dict[str, Any] = {
    "epsilon": 0.3,
    "window": 2,
    "perfect_score": 10.0,
}

BATTLE: dict[str, Any] = {
    "battle_type": "response",
    "mode": "auto",
    "category": "general",
    "rounds": 1,
    "prompt_rounds": 3,
    "max_tokens": 500,
    "temperature": 0.7,
    "improvement_max_tokens": 1500,
    "review_max_tokens": 800,
}

CLIENT: dict[str, Any] = {
    "provider": "groq",
    "api_base": None,
}


def get_defaults() -> dict[str, Any]:
    return copy.deepcopy(
        {
            "models": MODELS,
            "retry": RETRY,
            "convergence": CONVERGENCE,
            "battle": BATTLE,
            "client": CLIENT,
            "outputs_dir": None,
        }
    )
