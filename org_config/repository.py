"""Repository definitions and the team ownership tree.

Repositories are defined below the directory of the team owning them::

    teams/
      platform/
        team.yaml
        api-gateway.yaml        # owner: platform
        sre/
          team.yaml
          alerts.yaml           # owner: platform
    archived/
      old-service.yaml          # archived, no owner

The owner of a repository is the top-level team directory it was found
in, however deep it is nested. Repository names are unique across the
whole tree, archived ones included.
"""

import logging
import posixpath
import re
from collections import ChainMap
from collections.abc import Mapping, MutableMapping

from pydantic import BaseModel, Field, PrivateAttr

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
    EntityValidationError,
    LoadResult,
    LoadWarning,
)
from org_config.fs import FileSystem
from org_config.ruleset import Enforcement, RuleSetDefinition

log = logging.getLogger(__name__)

REPOSITORY_KIND = "Repository"
TEAM_FILENAME = "team.yaml"

_GITHUB_UNSAFE_CHARACTERS = re.compile(r"[^a-zA-Z0-9_.-]+")


def github_sanitized_name(name: str) -> str:
    """Name GitHub would actually give to a repository called name."""
    return _GITHUB_UNSAFE_CHARACTERS.sub("-", name)


class RepositoryRuleSet(RuleSetDefinition):
    name: str = ""


class RepositorySpec(SpecModel):
    writers: list[str] = Field(default_factory=list)
    readers: list[str] = Field(default_factory=list)
    external_user_readers: list[str] = Field(
        default_factory=list, alias="externalUserReaders"
    )
    external_user_writers: list[str] = Field(
        default_factory=list, alias="externalUserWriters"
    )
    is_public: bool = Field(False, alias="public")
    allow_auto_merge: bool = False
    delete_branch_on_merge: bool = False
    allow_update_branch: bool = False
    rulesets: list[RepositoryRuleSet] = Field(default_factory=list)


class RepositoryLocation(BaseModel, frozen=True):
    """Where a repository definition was found in the tree.

    Not part of the document, resolved by the directory reader.
    """

    path: str
    directory_path: str
    archived: bool = False
    owner: str | None = None


class Repository(Entity):
    spec: RepositorySpec = Field(default_factory=RepositorySpec)
    rename_to: str = Field("", alias="renameTo")

    _location: RepositoryLocation | None = PrivateAttr(default=None)

    def resolve(self, location: RepositoryLocation) -> "Repository":
        """Return a copy of this repository attached to location."""
        resolved = self.model_copy()
        resolved._location = location
        return resolved

    @property
    def location(self) -> RepositoryLocation | None:
        return self._location

    @property
    def archived(self) -> bool:
        return self._location is not None and self._location.archived

    @property
    def owner(self) -> str | None:
        return self._location.owner if self._location else None

    @property
    def directory_path(self) -> str | None:
        return self._location.directory_path if self._location else None


def validate_repository(
    repository: Repository,
    path: str,
    teams: Mapping[str, object],
    external_users: Mapping[str, object],
) -> None:
    """Raise EntityValidationError on the first problem found in repository."""
    validate_header(repository, path, REPOSITORY_KIND, "repository")
    spec = repository.spec

    for writer in spec.writers:
        if writer not in teams:
            raise EntityValidationError(
                path,
                f"invalid writer: {writer} doesn't exist (check repository filename {path})",
            )
    for reader in spec.readers:
        if reader not in teams:
            raise EntityValidationError(
                path,
                f"invalid reader: {reader} doesn't exist (check repository filename {path})",
            )

    for user in spec.external_user_readers:
        if user not in external_users:
            raise EntityValidationError(
                path,
                f"invalid externalUserReader: {user} doesn't exist in repository filename {path}",
            )
    for user in spec.external_user_writers:
        if user not in external_users:
            raise EntityValidationError(
                path,
                f"invalid externalUserWriter: {user} doesn't exist in repository filename {path}",
            )

    ruleset_names: set[str] = set()
    for ruleset in spec.rulesets:
        if not ruleset.name:
            raise EntityValidationError(
                path,
                f"invalid ruleset: each ruleset must have a name (check repository filename {path})",
            )
        if ruleset.enforcement not in set(Enforcement):
            raise EntityValidationError(
                path,
                f"invalid ruleset {ruleset.name} enforcement: it must be 'disable', "
                f"'active' or 'evaluate' (check repository filename {path})",
            )
        if ruleset.name in ruleset_names:
            raise EntityValidationError(
                path,
                f"invalid ruleset: each ruleset must have a uniq name, "
                f"found 2 times {ruleset.name} (check repository filename {path})",
            )
        ruleset_names.add(ruleset.name)

    sanitized = github_sanitized_name(repository.name)
    if sanitized != repository.name:
        raise EntityValidationError(
            path,
            f"invalid name: {repository.name} will be changed to {sanitized} "
            f"(check repository filename {path})",
        )


def _load_repository(
    fs: FileSystem,
    path: str,
    teams: Mapping[str, object],
    external_users: Mapping[str, object],
) -> Repository:
    repository = parse_entity(fs, path, Repository)
    validate_repository(repository, path, teams, external_users)
    return repository


def _read_archived(
    fs: FileSystem,
    dirname: str,
    teams: Mapping[str, object],
    external_users: Mapping[str, object],
) -> LoadResult[Repository]:
    result: LoadResult[Repository] = LoadResult()
    entries = read_entries(fs, dirname)
    if entries is None:
        log.debug(f"no archived directory {dirname}")
        return result

    for entry in entries:
        path = posixpath.join(dirname, entry.name)
        if entry.is_dir or is_hidden(entry.name):
            log.debug(f"skipping {path}")
            continue
        if not entry.name.endswith(YAML_EXTENSION):
            result.warnings.append(
                LoadWarning(
                    path, f"file {path} doesn't have a {YAML_EXTENSION} extension"
                )
            )
            continue
        try:
            repository = _load_repository(fs, path, teams, external_users)
        except EntityError as e:
            result.errors.append(e)
            continue
        result.entities[repository.name] = repository.resolve(
            RepositoryLocation(path=path, directory_path=dirname, archived=True)
        )
    return result


def _read_team_directory(
    fs: FileSystem,
    dirname: str,
    owner: str,
    archived_dirname: str,
    teams: Mapping[str, object],
    external_users: Mapping[str, object],
    known: MutableMapping[str, Repository],
) -> LoadResult[Repository]:
    """Read the repositories below dirname.

    known holds every repository loaded before this directory, the names
    found here are checked against it and against each other.
    """
    result: LoadResult[Repository] = LoadResult()
    seen = ChainMap(result.entities, known)
    try:
        entries = fs.read_dir(dirname)
    except OSError as e:
        result.errors.append(EntityReadError(dirname, e))
        return result

    for entry in entries:
        path = posixpath.join(dirname, entry.name)
        if is_hidden(entry.name):
            log.debug(f"skipping hidden {path}")
            continue
        if entry.is_dir:
            result.merge(
                _read_team_directory(
                    fs, path, owner, archived_dirname, teams, external_users, seen
                )
            )
            continue
        if entry.name == TEAM_FILENAME or posixpath.splitext(entry.name)[1] != (
            YAML_EXTENSION
        ):
            log.debug(f"skipping {path}, not a repository definition")
            continue

        try:
            repository = _load_repository(fs, path, teams, external_users)
        except EntityError as e:
            result.errors.append(e)
            continue

        existing = seen.get(repository.name)
        if existing is not None:
            existing_path = (
                existing.location.path
                if existing.location
                else posixpath.join(archived_dirname, repository.name)
            )
            result.errors.append(
                DuplicateEntityError(repository.name, path, existing_path)
            )
            continue

        result.entities[repository.name] = repository.resolve(
            RepositoryLocation(path=path, directory_path=dirname, owner=owner)
        )

    return result


def read_repositories(
    fs: FileSystem,
    archived_dirname: str,
    teams_dirname: str,
    teams: Mapping[str, object],
    external_users: Mapping[str, object],
) -> LoadResult[Repository]:
    """Read archived repositories, then every team's repositories.

    Archived repositories are loaded first: they have no owner but their
    names still collide with the ones defined below the teams.
    """
    result: LoadResult[Repository] = LoadResult()
    try:
        result.merge(_read_archived(fs, archived_dirname, teams, external_users))
        entries = read_entries(fs, teams_dirname)
    except EntityError as e:
        result.errors.append(e)
        return result
    if entries is None:
        log.debug(f"no teams directory {teams_dirname}")
        return result

    for entry in entries:
        if not entry.is_dir or is_hidden(entry.name):
            log.debug(f"skipping {posixpath.join(teams_dirname, entry.name)}")
            continue
        result.merge(
            _read_team_directory(
                fs,
                posixpath.join(teams_dirname, entry.name),
                entry.name,
                archived_dirname,
                teams,
                external_users,
                result.entities,
            )
        )

    return result
