from collections.abc import Callable
from textwrap import dedent

import pytest

from org_config.directory import Team, TeamSpec, User, UserSpec
from org_config.fs import MemoryFileSystem


@pytest.fixture
def teams() -> dict[str, Team]:
    return {
        name: Team(apiVersion="v1", kind="Team", name=name, spec=TeamSpec())
        for name in ("platform", "sre", "data")
    }


@pytest.fixture
def external_users() -> dict[str, User]:
    return {
        "outside-dev": User(
            apiVersion="v1",
            kind="User",
            name="outside-dev",
            spec=UserSpec(githubID="outside-dev-gh"),
        )
    }


@pytest.fixture
def fs_builder() -> Callable[[dict[str, str]], MemoryFileSystem]:
    """
    Build an in-memory tree from dedented YAML documents:
    {
        "teams/platform/api.yaml": '''
            apiVersion: v1
            kind: Repository
            name: api
        ''',
    }
    """

    def builder(files: dict[str, str]) -> MemoryFileSystem:
        return MemoryFileSystem({
            path: dedent(content).lstrip() for path, content in files.items()
        })

    return builder
