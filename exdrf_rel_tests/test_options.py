from unittest.mock import Mock

import pytest
from sqlalchemy import Select, false

from exdrf_rel.context import RenderContext
from exdrf_rel.options import (
    Candidate,
    base_query,
    find_candidate,
    load_options,
    record_attr,
)
from exdrf_rel_tests.models import User


class TestLoadOptions:
    def test_no_transform(self, repo, users):
        result = load_options(repo, User, None, "username", RenderContext())
        assert [c.as_tuple() for c in result] == [
            ("ada", 1),
            ("grace", 2),
            ("alan", 3),
        ]

    def test_other_display_attribute(self, repo, users):
        result = load_options(repo, User, None, "email", RenderContext())
        assert [c.label for c in result] == [
            "ada@example.com",
            "grace@example.com",
            "alan@example.com",
        ]

    def test_transform_filters(self, repo, users):
        def only_admins(query, ctx):
            return query.where(User.role == "admin")

        result = load_options(
            repo, User, only_admins, "username", RenderContext()
        )
        assert [c.as_tuple() for c in result] == [("ada", 1), ("alan", 3)]

    def test_transform_orders(self, repo, users):
        def by_name(query, ctx):
            return query.order_by(User.username)

        result = load_options(repo, User, by_name, "username", RenderContext())
        assert [c.label for c in result] == ["ada", "alan", "grace"]

    def test_transform_returns_nothing(self, repo, users):
        def nothing(query, ctx):
            return query.where(false())

        result = load_options(repo, User, nothing, "username", RenderContext())
        assert result == []

    def test_transform_receives_context(self, repo, users):
        ctx = RenderContext(actor="grace")
        transform = Mock(
            side_effect=lambda query, c: query.where(
                User.username != c.actor
            )
        )

        result = load_options(repo, User, transform, "username", ctx)

        assert transform.call_count == 1
        query, got_ctx = transform.call_args[0]
        assert isinstance(query, Select)
        assert got_ctx is ctx
        assert [c.label for c in result] == ["ada", "alan"]

    def test_transform_error_propagates(self, repo, users):
        def broken(query, ctx):
            raise RuntimeError("bad filter")

        with pytest.raises(RuntimeError, match="bad filter"):
            load_options(repo, User, broken, "username", RenderContext())

    def test_records_keep_repository_order(self):
        repo = Mock()
        repo.query_all.return_value = [
            {"id": 9, "username": "zed"},
            {"id": 4, "username": "amy"},
            {"id": 7},
        ]

        result = load_options(repo, User, None, "username", RenderContext())

        assert [c.as_tuple() for c in result] == [
            ("zed", 9),
            ("amy", 4),
            (None, 7),
        ]
        target, query = repo.query_all.call_args[0]
        assert target is User
        assert isinstance(query, Select)

    def test_candidates_carry_records(self, repo, users):
        result = load_options(repo, User, None, "username", RenderContext())
        assert result[1].record.email == "grace@example.com"


class TestCandidate:
    def test_equality_ignores_record(self):
        assert Candidate("ada", 1, record=object()) == Candidate("ada", 1)

    def test_matches(self):
        candidate = Candidate("ada", 1)
        assert candidate.matches("1")
        assert candidate.matches(1)
        assert not candidate.matches("2")
        assert not candidate.matches(None)

    def test_find_candidate(self):
        candidates = [Candidate("ada", 1), Candidate("grace", 2)]
        assert find_candidate(candidates, "2") == Candidate("grace", 2)
        assert find_candidate(candidates, "5") is None


def test_base_query_selects_everything():
    query = base_query(User)
    assert isinstance(query, Select)
    assert "FROM users" in str(query)


def test_record_attr():
    assert record_attr({"a": 1}, "a") == 1
    assert record_attr({"a": 1}, "b") is None
    assert record_attr(Mock(spec=["a"], a=2), "a") == 2
    assert record_attr(Mock(spec=["a"], a=2), "b") is None
