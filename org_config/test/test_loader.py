from org_config.config import Settings
from org_config.errors import DuplicateEntityError
from org_config.fs import LocalFileSystem, MemoryFileSystem
from org_config.loader import load_org_config

from .fixtures import Fixtures, repository_yaml

fxt = Fixtures("")


def settings() -> Settings:
    return Settings(_env_file=None)


def test_load_org_config() -> None:
    org = load_org_config(LocalFileSystem(fxt.path("tree")), settings())

    assert org.errors == []
    assert [w.path for w in org.warnings] == ["archived/notes.txt"]
    assert org.ok
    assert sorted(org.teams) == ["data", "platform", "sre"]
    assert list(org.external_users) == ["outside-dev"]
    assert list(org.rulesets) == ["default"]
    assert sorted(org.repositories) == [
        "alerts",
        "api-gateway",
        "legacy-portal",
        "warehouse",
    ]

    gateway = org.repositories["api-gateway"]
    assert gateway.owner == "platform"
    assert gateway.spec.writers == ["sre"]
    assert gateway.spec.rulesets[0].on.include == ["~DEFAULT_BRANCH"]
    assert gateway.spec.rulesets[0].rules[0].parameters.required_status_checks == [
        "build",
        "lint",
    ]

    alerts = org.repositories["alerts"]
    assert alerts.owner == "platform"
    assert alerts.directory_path == "teams/platform/sre"
    assert alerts.spec.is_public is True

    assert org.repositories["warehouse"].rename_to == "data-warehouse"
    assert org.repositories["legacy-portal"].archived is True
    assert org.repositories["legacy-portal"].owner is None

    default = org.rulesets["default"]
    assert default.spec.enforcement == "evaluate"
    assert default.spec.on.exclude == ["gh-pages"]
    assert default.spec.bypass_apps[0].app_name == "release-bot"


def test_load_org_config_duplicate() -> None:
    org = load_org_config(LocalFileSystem(fxt.path("duplicate")), settings())

    assert not org.ok
    assert len(org.errors) == 1
    assert isinstance(org.errors[0], DuplicateEntityError)
    assert "teams/data/warehouse.yaml" in str(org.errors[0])
    assert "archived/warehouse.yaml" in str(org.errors[0])
    assert org.repositories["warehouse"].archived is True


def test_load_org_config_custom_layout() -> None:
    fs = MemoryFileSystem({
        "org/groups/data/team.yaml": "apiVersion: v1\nkind: Team\nname: data\n",
        "org/groups/data/warehouse.yaml": repository_yaml(
            "warehouse", "writers: [data]\nreaders: [contractor]"
        ),
        "org/attic/old.yaml": repository_yaml("old"),
        "org/collaborators/contractor.yaml": "apiVersion: v1\nkind: User\nname: contractor\n",
    })
    custom = Settings(
        _env_file=None,
        teams_dir="org/groups",
        archived_dir="org/attic",
        rulesets_dir="org/rulesets",
        external_users_dir="org/collaborators",
    )

    org = load_org_config(fs, custom)

    # contractor is an external user, not a team
    assert len(org.errors) == 1
    assert "invalid reader: contractor" in str(org.errors[0])
    assert list(org.repositories) == ["old"]
    assert list(org.external_users) == ["contractor"]
    assert org.rulesets == {}


def test_load_org_config_empty_tree() -> None:
    org = load_org_config(MemoryFileSystem(), settings())
    assert org.ok
    assert org.warnings == []
    assert org.repositories == {}
    assert org.teams == {}
