"""Teams and external collaborators, the lookup tables repositories refer to.

Every directory below the team root holding a ``team.yaml`` defines a team
named after that directory. External collaborators are flat files in their
own directory.
"""

import logging
import posixpath

from pydantic import Field

from org_config.entity import (
    YAML_EXTENSION,
    Entity,
    SpecModel,
    is_hidden,
    parse_entity,
    read_entries,
    validate_header,
)
from org_config.errors import (
    DuplicateEntityError,
    EntityError,
    EntityReadError,
    LoadResult,
)
from org_config.fs import FileSystem
from org_config.repository import TEAM_FILENAME

log = logging.getLogger(__name__)

TEAM_KIND = "Team"
USER_KIND = "User"


class TeamSpec(SpecModel):
    owners: list[str] = Field(default_factory=list)
    members: list[str] = Field(default_factory=list)


class Team(Entity):
    spec: TeamSpec = Field(default_factory=TeamSpec)


class UserSpec(SpecModel):
    github_id: str = Field("", alias="githubID")


class User(Entity):
    spec: UserSpec = Field(default_factory=UserSpec)


def _read_team_tree(
    fs: FileSystem, dirname: str, result: LoadResult[Team], paths: dict[str, str]
) -> None:
    try:
        entries = fs.read_dir(dirname)
    except OSError as e:
        result.errors.append(EntityReadError(dirname, e))
        return

    team_name = posixpath.basename(dirname)
    if any(e.name == TEAM_FILENAME and not e.is_dir for e in entries):
        path = posixpath.join(dirname, TEAM_FILENAME)
        try:
            team = parse_entity(fs, path, Team)
            validate_header(team, path, TEAM_KIND, "team", expected_name=team_name)
        except EntityError as e:
            result.errors.append(e)
        else:
            if team.name in paths:
                result.errors.append(
                    DuplicateEntityError(team.name, path, paths[team.name], label="Team")
                )
            else:
                result.entities[team.name] = team
                paths[team.name] = path

    for entry in entries:
        if entry.is_dir and not is_hidden(entry.name):
            _read_team_tree(fs, posixpath.join(dirname, entry.name), result, paths)


def read_teams(fs: FileSystem, dirname: str) -> LoadResult[Team]:
    """Read every team definition below dirname, nested teams included."""
    result: LoadResult[Team] = LoadResult()
    paths: dict[str, str] = {}
    try:
        entries = read_entries(fs, dirname)
    except EntityError as e:
        result.errors.append(e)
        return result
    if entries is None:
        log.debug(f"no teams directory {dirname}")
        return result

    for entry in entries:
        if entry.is_dir and not is_hidden(entry.name):
            _read_team_tree(fs, posixpath.join(dirname, entry.name), result, paths)
    return result


def read_external_users(fs: FileSystem, dirname: str) -> LoadResult[User]:
    """Read the external collaborators defined directly under dirname."""
    result: LoadResult[User] = LoadResult()
    try:
        entries = read_entries(fs, dirname)
    except EntityError as e:
        result.errors.append(e)
        return result
    if entries is None:
        log.debug(f"no external users directory {dirname}")
        return result

    for entry in entries:
        path = posixpath.join(dirname, entry.name)
        if (
            entry.is_dir
            or is_hidden(entry.name)
            or not entry.name.endswith(YAML_EXTENSION)
        ):
            log.debug(f"skipping {path}")
            continue
        try:
            user = parse_entity(fs, path, User)
            validate_header(user, path, USER_KIND, "user")
        except EntityError as e:
            result.errors.append(e)
            continue
        result.entities[user.name] = user
    return result
