"""Per-request resolution of the agent's own Linear identity."""

import logging
from typing import Optional

from .linear_client import IssueStore
from .models import AgentIdentity

logger = logging.getLogger(__name__)


class SelfIdentityResolver:
    """Fetches the agent identity on first use and memoizes it.
    
    One resolver lives for one request only; tokens can rotate between
    requests, so nothing is cached at module level.
    """
    
    def __init__(self, store: IssueStore):
        self.store = store
        self._identity: Optional[AgentIdentity] = None
    
    def resolve(self) -> AgentIdentity:
        if self._identity is None:
            self._identity = self.store.current_agent_identity()
            logger.info(f"Acting as {self._identity.display_name or self._identity.name} ({self._identity.id})")
        return self._identity
