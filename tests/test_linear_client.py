"""Tests for the Linear GraphQL store."""

from unittest.mock import MagicMock

import pytest
import requests

from linear_agent.config import LinearConfig
from linear_agent.credentials import EnvCredentialProvider
from linear_agent.errors import LinearAPIError, MissingCredentialError
from linear_agent.linear_client import LinearIssueStore


def _response(data=None, errors=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    body = {}
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    response.json.return_value = body
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


def _store(*responses, token="oauth-token", page_size=50):
    config = LinearConfig(
        api_url="https://api.linear.test/graphql",
        access_token=token,
        token_secret_arn=None,
        page_size=page_size,
    )
    session = MagicMock()
    session.post.side_effect = list(responses)
    return LinearIssueStore(config, EnvCredentialProvider(config), session=session), session


def _node(comment_id, user_id, body="text", parent_id="root"):
    return {
        "id": comment_id,
        "body": body,
        "user": {"id": user_id} if user_id else None,
        "parent": {"id": parent_id} if parent_id else None,
        "issue": {"id": "issue-1"},
    }


def test_current_agent_identity() -> None:
    store, session = _store(_response({"viewer": {"id": "u-1", "name": "agentbot", "displayName": "AgentBot"}}))

    identity = store.current_agent_identity()

    assert (identity.id, identity.name, identity.display_name) == ("u-1", "agentbot", "AgentBot")
    headers = session.post.call_args.kwargs["headers"]
    assert headers["Authorization"] == "Bearer oauth-token"


def test_personal_api_key_sent_without_bearer_prefix() -> None:
    store, session = _store(
        _response({"issue": {"id": "issue-1", "title": "t", "description": None}}),
        token="lin_api_abc",
    )

    store.get_issue("issue-1")

    assert session.post.call_args.kwargs["headers"]["Authorization"] == "lin_api_abc"


def test_missing_token_fails_before_any_request() -> None:
    store, session = _store(token=None)

    with pytest.raises(MissingCredentialError):
        store.current_agent_identity()
    session.post.assert_not_called()


def test_get_issue() -> None:
    store, session = _store(_response({"issue": {"id": "issue-1", "title": "Bug", "description": "Steps"}}))

    issue = store.get_issue("issue-1")

    assert (issue.id, issue.title, issue.description) == ("issue-1", "Bug", "Steps")
    assert session.post.call_args.kwargs["json"]["variables"] == {"id": "issue-1"}


def test_list_comments_follows_pages_in_order() -> None:
    store, session = _store(
        _response({"comments": {
            "nodes": [_node("c-1", "u-1"), _node("c-2", "u-2")],
            "pageInfo": {"hasNextPage": True, "endCursor": "cursor-1"},
        }}),
        _response({"comments": {
            "nodes": [_node("c-3", None)],
            "pageInfo": {"hasNextPage": False, "endCursor": None},
        }}),
        page_size=2,
    )

    comments = store.list_comments_by_parent("root")

    assert [c.id for c in comments] == ["c-1", "c-2", "c-3"]
    assert comments[2].user_id is None
    assert all(c.parent_id == "root" for c in comments)
    first, second = session.post.call_args_list
    assert first.kwargs["json"]["variables"] == {"parentId": "root", "first": 2, "after": None}
    assert second.kwargs["json"]["variables"]["after"] == "cursor-1"


def test_create_reply_sends_parent_id() -> None:
    store, session = _store(_response({"commentCreate": {
        "success": True,
        "comment": _node("new-1", "u-1", body="Reply", parent_id="root"),
    }}))

    comment = store.create_comment("issue-1", "Reply", parent_id="root")

    assert comment.parent_id == "root"
    assert session.post.call_args.kwargs["json"]["variables"] == {
        "input": {"issueId": "issue-1", "body": "Reply", "parentId": "root"}
    }


def test_create_top_level_comment_omits_parent_id() -> None:
    store, session = _store(_response({"commentCreate": {
        "success": True,
        "comment": _node("new-1", "u-1", parent_id=None),
    }}))

    comment = store.create_comment("issue-1", "Hi")

    assert comment.parent_id is None
    assert "parentId" not in session.post.call_args.kwargs["json"]["variables"]["input"]


def test_unsuccessful_mutation_raises() -> None:
    store, _ = _store(_response({"commentCreate": {"success": False, "comment": None}}))

    with pytest.raises(LinearAPIError):
        store.create_comment("issue-1", "Hi")


def test_graphql_errors_raise() -> None:
    store, _ = _store(_response(errors=[{"message": "Entity not found"}]))

    with pytest.raises(LinearAPIError, match="Entity not found"):
        store.get_issue("missing")


def test_http_errors_propagate_unmodified() -> None:
    store, _ = _store(_response(status_code=502))

    with pytest.raises(requests.HTTPError):
        store.current_agent_identity()


def test_token_fetched_once_per_store() -> None:
    viewer = {"viewer": {"id": "u-1", "name": "a", "displayName": "A"}}
    store, _ = _store(_response(viewer), _response(viewer))
    store.credentials = MagicMock()
    store.credentials.get_access_token.return_value = "tok"

    store.current_agent_identity()
    store.current_agent_identity()

    store.credentials.get_access_token.assert_called_once()


def test_list_comments_stops_when_next_page_has_no_cursor() -> None:
    store, session = _store(
        _response({"comments": {
            "nodes": [_node("c-1", "u-1")],
            "pageInfo": {"hasNextPage": True, "endCursor": None},
        }}),
        _response({"comments": {
            "nodes": [_node("c-1", "u-1")],
            "pageInfo": {"hasNextPage": True, "endCursor": None},
        }}),
    )

    comments = store.list_comments_by_parent("root")

    assert [c.id for c in comments] == ["c-1"]
    assert session.post.call_count == 1
