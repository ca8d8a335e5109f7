"""Agent orchestrator: classify, build context, generate and dispatch a reply."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .classifier import classify_notification
from .context import agent_participates, build_messages, comment_context, issue_context
from .identity import SelfIdentityResolver
from .linear_client import IssueStore
from .llm_client import LLMClient
from .models import Comment, Notification, NotificationType
from .reply import NO_DESCRIPTION_REPLY, dispatch_reply, generate_reply, reply_parent_id

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    """States a notification passes through."""
    RECEIVED = "received"
    CLASSIFIED = "classified"
    CONTEXT_BUILT = "context-built"
    REPLY_GENERATED = "reply-generated"
    DISPATCHED = "dispatched"
    REJECTED = "rejected"
    FAILED = "failed"


TERMINAL_STATES = {WorkflowState.DISPATCHED, WorkflowState.REJECTED, WorkflowState.FAILED}


@dataclass
class AgentOutcome:
    """Where a single notification ended up."""
    state: WorkflowState = WorkflowState.RECEIVED
    notification: Optional[Notification] = None
    reply: Optional[str] = None
    comment: Optional[Comment] = None
    reason: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.state == WorkflowState.FAILED

    def advance(self, state: WorkflowState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Cannot move from terminal state {self.state.value} to {state.value}")
        logger.debug(f"Workflow {self.state.value} -> {state.value}")
        self.state = state

    def reject(self, reason: str) -> "AgentOutcome":
        self.advance(WorkflowState.REJECTED)
        self.reason = reason
        logger.info(f"Notification not actionable: {reason}")
        return self


class Agent:
    """Handles one webhook delivery.

    An Agent is built per request; the agent identity it resolves is only
    valid for that request.
    """

    def __init__(self, store: IssueStore, llm_client: LLMClient):
        self.store = store
        self.llm_client = llm_client
        self.identity = SelfIdentityResolver(store)

    def process(self, payload: Any) -> AgentOutcome:
        """
        Run a raw webhook payload through the whole workflow.

        Never raises: errors end in the FAILED state with the exception
        attached to the outcome.
        """
        outcome = AgentOutcome()
        try:
            notification = classify_notification(payload)
            if notification is None:
                return outcome.reject("not an actionable notification")
            outcome.notification = notification
            outcome.advance(WorkflowState.CLASSIFIED)

            if notification.is_issue_workflow:
                self._handle_issue(notification, outcome)
            else:
                self._handle_comment(notification, outcome)
        except Exception as e:
            logger.error(f"Error handling notification (state {outcome.state.value}): {e}", exc_info=True)
            outcome.state = WorkflowState.FAILED
            outcome.error = e
        return outcome

    def _handle_issue(self, notification: Notification, outcome: AgentOutcome) -> None:
        """Issue assigned to the agent, or the agent mentioned in the description."""
        issue = self.store.get_issue(notification.issue_id)
        identity = self.identity.resolve()

        source = issue_context(issue)
        outcome.advance(WorkflowState.CONTEXT_BUILT)

        if source is None:
            logger.info(f"Issue {issue.id} has no description, asking for a question instead")
            outcome.reply = NO_DESCRIPTION_REPLY
        else:
            outcome.reply = generate_reply(self.llm_client, build_messages(source, identity))
        outcome.advance(WorkflowState.REPLY_GENERATED)

        outcome.comment = dispatch_reply(self.store, issue.id, outcome.reply, reply_parent_id(notification))
        outcome.advance(WorkflowState.DISPATCHED)

    def _handle_comment(self, notification: Notification, outcome: AgentOutcome) -> None:
        """Agent mentioned in a comment, or a new reply in a thread it takes part in."""
        identity = self.identity.resolve()
        source = comment_context(self.store, notification.comment, notification.parent_comment_id)

        if notification.type == NotificationType.NEW_COMMENT and not agent_participates(source, identity, notification.parent_author_id):
            outcome.reject(f"agent has not taken part in thread {notification.parent_comment_id}")
            return

        messages = build_messages(source, identity)
        outcome.advance(WorkflowState.CONTEXT_BUILT)

        outcome.reply = generate_reply(self.llm_client, messages)
        outcome.advance(WorkflowState.REPLY_GENERATED)

        outcome.comment = dispatch_reply(
            self.store,
            notification.issue_id,
            outcome.reply,
            reply_parent_id(notification),
        )
        outcome.advance(WorkflowState.DISPATCHED)
