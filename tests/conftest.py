"""Shared fakes and payload builders for the test suite."""

from typing import Dict, List, Optional

import pytest

from linear_agent.config import AppConfig, LinearConfig, LLMConfig, WebhookConfig
from linear_agent.linear_client import IssueStore
from linear_agent.llm_client import LLMClient
from linear_agent.models import AgentIdentity, Comment, Issue

AGENT = AgentIdentity(id="agent-user", name="agentbot", display_name="AgentBot")


class FakeIssueStore(IssueStore):
    """In-memory issue store recording every call."""

    def __init__(
        self,
        identity: AgentIdentity = AGENT,
        issues: Optional[Dict[str, Issue]] = None,
        threads: Optional[Dict[str, List[Comment]]] = None,
    ):
        self.identity = identity
        self.issues = issues or {}
        self.threads = threads or {}
        self.created: List[Comment] = []
        self.identity_calls = 0
        self.thread_requests: List[str] = []
        self.fail_on_create: Optional[Exception] = None
        self.fail_on_identity: Optional[Exception] = None

    def get_issue(self, issue_id: str) -> Issue:
        return self.issues[issue_id]

    def list_comments_by_parent(self, parent_id: str) -> List[Comment]:
        self.thread_requests.append(parent_id)
        return list(self.threads.get(parent_id, []))

    def create_comment(self, issue_id: str, body: str, parent_id: Optional[str] = None) -> Comment:
        if self.fail_on_create:
            raise self.fail_on_create
        comment = Comment(
            id=f"created-{len(self.created) + 1}",
            issue_id=issue_id,
            body=body,
            user_id=self.identity.id,
            parent_id=parent_id,
        )
        self.created.append(comment)
        return comment

    def current_agent_identity(self) -> AgentIdentity:
        self.identity_calls += 1
        if self.fail_on_identity:
            raise self.fail_on_identity
        return self.identity


class FakeLLMClient(LLMClient):
    """Completion backend returning a canned reply."""

    def __init__(self, reply: Optional[str] = "Sure, on it.", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, system_prompt, messages):
        self.calls.append((system_prompt, messages))
        if self.error:
            raise self.error
        return self.reply


def notification_payload(notification: dict, **extra) -> dict:
    payload = {
        "type": "AppUserNotification",
        "action": notification.get("type"),
        "appUserId": AGENT.id,
        "webhookId": "webhook-1",
        "notification": notification,
    }
    payload.update(extra)
    return payload


def comment_data(comment_id="c-1", body="Hello", user_id="user-1", issue_id="issue-1") -> dict:
    return {"id": comment_id, "body": body, "userId": user_id, "issueId": issue_id}


@pytest.fixture
def store():
    return FakeIssueStore()


@pytest.fixture
def llm():
    return FakeLLMClient()


@pytest.fixture
def app_config():
    return AppConfig(
        linear=LinearConfig(
            api_url="https://api.linear.test/graphql",
            access_token="oauth-token",
            token_secret_arn=None,
        ),
        llm=LLMConfig(
            provider="openai",
            api_key="sk-test",
            model="gpt-4o-mini",
            base_url=None,
            max_tokens=500,
            temperature=0.2,
        ),
        webhook=WebhookConfig(secret="webhook-secret"),
    )
