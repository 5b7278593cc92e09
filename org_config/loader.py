import logging
from dataclasses import dataclass, field

from org_config.config import Settings, settings as default_settings
from org_config.directory import Team, User, read_external_users, read_teams
from org_config.errors import EntityError, LoadResult, LoadWarning
from org_config.fs import FileSystem
from org_config.repository import Repository, read_repositories
from org_config.ruleset import RuleSet, read_ruleset_directory

log = logging.getLogger(__name__)


@dataclass
class OrgConfig:
    """Validated content of a whole configuration tree."""

    teams: dict[str, Team] = field(default_factory=dict)
    external_users: dict[str, User] = field(default_factory=dict)
    rulesets: dict[str, RuleSet] = field(default_factory=dict)
    repositories: dict[str, Repository] = field(default_factory=dict)
    errors: list[EntityError] = field(default_factory=list)
    warnings: list[LoadWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def _collect(self, result: LoadResult) -> dict:
        self.errors.extend(result.errors)
        self.warnings.extend(result.warnings)
        return result.entities


def load_org_config(fs: FileSystem, settings: Settings | None = None) -> OrgConfig:
    """Load users, teams, rulesets and repositories from fs.

    Repositories are validated against the teams and users loaded first.
    """
    settings = settings or default_settings
    org = OrgConfig()
    org.external_users = org._collect(
        read_external_users(fs, settings.external_users_dir)
    )
    org.teams = org._collect(read_teams(fs, settings.teams_dir))
    org.rulesets = org._collect(read_ruleset_directory(fs, settings.rulesets_dir))
    org.repositories = org._collect(
        read_repositories(
            fs,
            settings.archived_dir,
            settings.teams_dir,
            org.teams,
            org.external_users,
        )
    )
    log.info(
        f"loaded {len(org.teams)} teams, {len(org.external_users)} external users, "
        f"{len(org.rulesets)} rulesets, {len(org.repositories)} repositories "
        f"({len(org.errors)} errors, {len(org.warnings)} warnings)"
    )
    return org
