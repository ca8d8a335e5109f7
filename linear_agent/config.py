"""Configuration management."""

import os
from dataclasses import dataclass
from typing import Optional

try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass  # python-dotenv is optional


@dataclass
class LinearConfig:
    """Linear API configuration."""
    api_url: str
    access_token: Optional[str]      # OAuth access token or personal API key
    token_secret_arn: Optional[str]  # Secrets Manager ARN holding the token
    page_size: int = 50              # Comments fetched per GraphQL page
    timeout: float = 30.0


@dataclass
class LLMConfig:
    """LLM API configuration."""
    provider: str         # e.g. "openai" or "generic_http"
    api_key: str
    model: str
    base_url: Optional[str]  # allow custom endpoint
    max_tokens: int
    temperature: float
    system_role: str = "developer"  # role used for the behavioural prompt


@dataclass
class WebhookConfig:
    """Webhook ingestion configuration."""
    secret: str
    signature_header: str = "linear-signature"


@dataclass
class AppConfig:
    """Complete application configuration."""
    linear: LinearConfig
    llm: LLMConfig
    webhook: WebhookConfig


def load_config() -> AppConfig:
    """
    Load configuration from environment variables.
    
    Raises:
        ValueError: If required configuration values are missing.
    """
    # Linear configuration
    linear_api_url = os.getenv("LINEAR_API_URL", "https://api.linear.app/graphql")
    linear_access_token = os.getenv("LINEAR_ACCESS_TOKEN")
    linear_token_secret_arn = os.getenv("LINEAR_TOKEN_SECRET_ARN")
    linear_page_size = int(os.getenv("LINEAR_PAGE_SIZE", "50"))
    linear_timeout = float(os.getenv("LINEAR_TIMEOUT_SECONDS", "30"))
    
    # LLM configuration
    llm_provider = os.getenv("LLM_PROVIDER", "openai")
    llm_api_key = os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY")
    llm_model = os.getenv("LLM_MODEL", "gpt-4o-mini")
    llm_base_url = os.getenv("LLM_BASE_URL")
    llm_max_tokens = int(os.getenv("LLM_MAX_TOKENS", "1000"))
    llm_temperature = float(os.getenv("LLM_TEMPERATURE", "0.2"))
    llm_system_role = os.getenv("LLM_SYSTEM_ROLE", "developer")
    
    # Webhook configuration
    webhook_secret = os.getenv("LINEAR_WEBHOOK_SECRET")
    signature_header = os.getenv("LINEAR_SIGNATURE_HEADER", "linear-signature")
    
    # Validate required fields. The Linear token is resolved per request by
    # the credential provider, so it is not checked here.
    missing = []
    if not webhook_secret:
        missing.append("LINEAR_WEBHOOK_SECRET")
    if not llm_api_key:
        missing.append("LLM_API_KEY")
    
    if missing:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing)}"
        )
    
    return AppConfig(
        linear=LinearConfig(
            api_url=linear_api_url,
            access_token=linear_access_token,
            token_secret_arn=linear_token_secret_arn,
            page_size=linear_page_size,
            timeout=linear_timeout,
        ),
        llm=LLMConfig(
            provider=llm_provider,
            api_key=llm_api_key,
            model=llm_model,
            base_url=llm_base_url,
            max_tokens=llm_max_tokens,
            temperature=llm_temperature,
            system_role=llm_system_role,
        ),
        webhook=WebhookConfig(
            secret=webhook_secret,
            signature_header=signature_header.lower(),
        ),
    )
