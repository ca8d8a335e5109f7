"""Removal of the agent's own @-mentions from message text."""

from typing import List

from .models import AgentIdentity


def mention_tokens(identity: AgentIdentity) -> List[str]:
    """Return the agent's mention tokens, longest first."""
    tokens = {f"@{name}" for name in (identity.name, identity.display_name) if name}
    return sorted(tokens, key=len, reverse=True)


def strip_self_mentions(text: str, identity: AgentIdentity) -> str:
    """
    Remove every ``@name`` and ``@displayName`` token of the agent.
    
    Removal repeats until no token is left, so the result is stable under
    a second pass (``"@@BotBot"`` does not leave a fresh ``"@Bot"`` behind).
    Surrounding whitespace is left untouched.
    """
    tokens = mention_tokens(identity)
    changed = True
    while changed:
        changed = False
        for token in tokens:
            if token in text:
                text = text.replace(token, "")
                changed = True
    return text
