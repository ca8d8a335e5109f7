"""OpenAI LLM client implementation."""

import logging
from typing import Dict, List, Optional

import requests

from .config import LLMConfig
from .llm_client import LLMClient

logger = logging.getLogger(__name__)

try:
    from openai import OpenAI
    OPENAI_AVAILABLE = True
except ImportError:
    OPENAI_AVAILABLE = False
    logger.warning("OpenAI library not installed. Install with: pip install openai")


def _build_messages(config: LLMConfig, system_prompt: str, messages: List[Dict[str, str]]) -> List[Dict[str, str]]:
    return [{"role": config.system_role, "content": system_prompt}, *messages]


class OpenAILLMClient(LLMClient):
    """OpenAI API client for chat completion."""
    
    def __init__(self, config: LLMConfig):
        """
        Initialize the OpenAI client.
        
        Args:
            config: LLM configuration.
        """
        if not OPENAI_AVAILABLE:
            raise ImportError(
                "OpenAI library not installed. Install with: pip install openai"
            )
        
        self.config = config
        self.client = OpenAI(
            api_key=config.api_key,
            base_url=config.base_url if config.base_url else None
        )
    
    def complete(self, system_prompt: str, messages: List[Dict[str, str]]) -> Optional[str]:
        """
        Complete a conversation using OpenAI's API.
        
        Args:
            system_prompt: Behavioural prompt placed before the conversation.
            messages: Chat messages in order.
            
        Returns:
            The LLM's response text (trimmed), or None.
        """
        try:
            response = self.client.chat.completions.create(
                model=self.config.model,
                messages=_build_messages(self.config, system_prompt, messages),
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise
        content = response.choices[0].message.content
        return content.strip() if content else None


class GenericHTTPLLMClient(LLMClient):
    """Generic HTTP client for OpenAI-compatible LLM APIs."""
    
    def __init__(self, config: LLMConfig):
        """
        Initialize the generic HTTP client.
        
        Args:
            config: LLM configuration.
        """
        self.config = config
        self.base_url = (config.base_url or "https://api.openai.com/v1").rstrip("/")
        self.api_key = config.api_key
        self.model = config.model
    
    def complete(self, system_prompt: str, messages: List[Dict[str, str]]) -> Optional[str]:
        """
        Complete a conversation using a generic HTTP API (OpenAI-compatible).
        
        Args:
            system_prompt: Behavioural prompt placed before the conversation.
            messages: Chat messages in order.
            
        Returns:
            The LLM's response text (trimmed), or None.
        """
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        payload = {
            "model": self.model,
            "messages": _build_messages(self.config, system_prompt, messages),
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        
        try:
            response = requests.post(url, json=payload, headers=headers, timeout=30)
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            logger.error(f"HTTP LLM API error: {e}")
            raise
        content = data["choices"][0]["message"].get("content")
        return content.strip() if content else None


def create_llm_client(config: LLMConfig) -> LLMClient:
    """Create an LLM client based on configuration."""
    if config.provider == "openai":
        return OpenAILLMClient(config)
    else:
        return GenericHTTPLLMClient(config)
