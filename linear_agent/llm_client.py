"""Abstract LLM client interface."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class LLMClient(ABC):
    """Abstract base class for LLM clients."""
    
    @abstractmethod
    def complete(self, system_prompt: str, messages: List[Dict[str, str]]) -> Optional[str]:
        """
        Complete a conversation using the LLM.
        
        Args:
            system_prompt: Behavioural prompt placed before the conversation.
            messages: Chat messages (``{"role": ..., "content": ...}``) in order.
            
        Returns:
            The LLM's response text (trimmed), or None if it gave none.
        """
        pass
