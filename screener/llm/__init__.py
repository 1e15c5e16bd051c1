from screener.llm.openai import MalformedReplyError, OpenAIConfig, StructuredOpenAI
from screener.llm.prompt import build_system_prompt

__all__ = [
    "MalformedReplyError",
    "OpenAIConfig",
    "StructuredOpenAI",
    "build_system_prompt",
]
