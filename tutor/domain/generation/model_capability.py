from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, SystemMessage
from langchain_core.tools import BaseTool
from langchain_openai import ChatOpenAI


class ModelCapability(ABC):
    """Language generation capability used by the response generator"""

    @abstractmethod
    async def invoke(
        self,
        system_instruction: str,
        messages: List[BaseMessage],
        tools: Sequence[BaseTool]
    ) -> AIMessage:
        """Generate one message, optionally requesting tool calls"""
        pass


class ChatModelCapability(ModelCapability):
    """Adapter binding tools to a LangChain chat model"""

    def __init__(self, llm: BaseChatModel):
        self.llm = llm

    async def invoke(
        self,
        system_instruction: str,
        messages: List[BaseMessage],
        tools: Sequence[BaseTool]
    ) -> AIMessage:
        runnable = self.llm.bind_tools(list(tools)) if tools else self.llm
        return await runnable.ainvoke([SystemMessage(content=system_instruction), *messages])


def build_openai_capability(model_name: str = "gpt-4o", api_key: Optional[str] = None) -> ChatModelCapability:
    """Default deployment model"""

    kwargs = {"model": model_name}
    if api_key:
        kwargs["api_key"] = api_key
    return ChatModelCapability(ChatOpenAI(**kwargs))
