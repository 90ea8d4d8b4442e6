"""Tests for configuration helpers."""

from riding_school.config import parse_api_tokens
from riding_school.domain.riders import Principal


def test_parse_api_tokens() -> None:
    tokens = parse_api_tokens(
        " t1:admin:admin , t2:alice:rider,broken,t3:eve:owner,:x:rider"
    )

    assert tokens == {
        "t1": Principal(username="admin", role="admin"),
        "t2": Principal(username="alice", role="rider"),
    }


def test_parse_api_tokens_empty() -> None:
    assert parse_api_tokens(None) == {}
    assert parse_api_tokens("") == {}
