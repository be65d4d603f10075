from .model_capability import ModelCapability, ChatModelCapability, build_openai_capability
from .prompts import build_system_instruction
from .response_generator import ResponseGenerator

__all__ = [
    "ModelCapability",
    "ChatModelCapability",
    "build_openai_capability",
    "build_system_instruction",
    "ResponseGenerator",
]
