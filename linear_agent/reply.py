"""Reply generation and dispatch."""

import logging
from typing import Dict, List, Optional, Sequence

from .errors import CompletionError
from .linear_client import IssueStore
from .llm_client import LLMClient
from .models import Comment, Notification, Role, RoleTaggedMessage

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful assistant that can help with issues on Linear.
If a question has been asked of you, respond with a helpful answer.
If a question has not been asked of you, respond with a summary of the conversation.

## Tone of voice

- Use concise language without any preamble or introduction
- Avoid including your own thoughts or analysis unless the user explicitly asks for it
- Use a clear and direct tone (no corpospeak, no flowery wording)
- Use the first person to keep the conversation personal
- Answer like a human, not like a search engine
- Don't just list data you've found, talk with the user as if you are answering a question in a normal conversation
"""

NO_DESCRIPTION_REPLY = "How can I help you with this issue? Please tag me in a reply with your question."

CHAT_ROLES = {
    Role.AGENT: "assistant",
    Role.OTHER: "user",
}


def to_chat_messages(messages: Sequence[RoleTaggedMessage]) -> List[Dict[str, str]]:
    """Convert role-tagged messages to chat-completion messages."""
    return [{"role": CHAT_ROLES[message.role], "content": message.text} for message in messages]


def generate_reply(client: LLMClient, messages: Sequence[RoleTaggedMessage]) -> str:
    """
    Ask the completion backend for a reply to the conversation.
    
    Raises:
        CompletionError: If the backend returns no text.
    """
    reply = client.complete(SYSTEM_PROMPT, to_chat_messages(messages))
    if reply is None or not reply.strip():
        raise CompletionError("Completion backend returned an empty reply")
    logger.debug(f"Generated reply: {reply[:100]}...")
    return reply


def reply_parent_id(notification: Notification) -> Optional[str]:
    """
    Parent comment the reply attaches to.
    
    The thread parent wins, then the inbound comment itself; issue
    notifications without a comment get a top-level reply (None).
    """
    if notification.parent_comment_id:
        return notification.parent_comment_id
    if notification.comment is not None:
        return notification.comment.id
    return None


def dispatch_reply(store: IssueStore, issue_id: str, body: str, parent_id: Optional[str] = None) -> Comment:
    """Post the reply on the issue, in the thread under ``parent_id`` if given."""
    comment = store.create_comment(issue_id, body, parent_id=parent_id)
    if parent_id:
        logger.info(f"Posted reply {comment.id} on issue {issue_id} under comment {parent_id}")
    else:
        logger.info(f"Posted top-level comment {comment.id} on issue {issue_id}")
    return comment
