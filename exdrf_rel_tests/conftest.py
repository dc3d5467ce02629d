"""
Available fixtures:

- **`repo`**: a `SqlRepo` over an in-memory SQLite database with all the
  tables of the test models created.
- **`users`**: three users, `ada`, `grace` and `alan`, inserted in this
  order (ids 1, 2 and 3).
- **`post`**: a post written by `ada`.
- **`authorizer`** / **`router`**: mocks of the authorization and path
  generation collaborators; the router returns `/admin/users/<id>`.
- **`host`**: a `FieldHost` using the fixtures above; the repository is
  also the inline updater.
- **`ctx`**: a render context of an index page.
"""

from unittest.mock import Mock

import pytest

from exdrf_rel.context import FieldHost, RenderContext
from exdrf_rel.repo import SqlRepo
from exdrf_rel_tests.models import Base, Post, User


@pytest.fixture
def repo():
    result = SqlRepo(c_string="sqlite:///:memory:")
    result.create_all_tables(Base)
    yield result
    result.close()


@pytest.fixture
def users(repo):
    records = [
        User(username="ada", email="ada@example.com", role="admin"),
        User(username="grace", email="grace@example.com", role="member"),
        User(username="alan", email="alan@example.com", role="admin"),
    ]
    with repo.session(auto_commit=True) as session:
        session.add_all(records)
    return records


@pytest.fixture
def post(repo, users):
    record = Post(title="Hello", user_id=users[0].id)
    with repo.session(auto_commit=True) as session:
        session.add(record)
    return record


@pytest.fixture
def authorizer():
    result = Mock()
    result.can_perform.return_value = True
    return result


@pytest.fixture
def router():
    result = Mock()
    result.build_path.side_effect = (
        lambda connection, resource, params, action, record: (
            f"/admin/users/{record.id}"
        )
    )
    return result


@pytest.fixture
def host(repo, authorizer, router):
    return FieldHost(
        repo=repo,
        authorizer=authorizer,
        router=router,
        updater=repo,
    )


@pytest.fixture
def ctx(post):
    return RenderContext(
        connection="socket",
        actor="admin",
        params={"tenant": "acme"},
        live_action="index",
        item=post,
    )
