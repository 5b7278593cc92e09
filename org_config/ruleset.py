"""Branch protection rulesets.

A ruleset file lives in the organization rulesets directory::

    apiVersion: v1
    kind: Ruleset
    name: default
    spec:
      enforcement: active
      bypassapps:
        - appname: release-bot
          mode: always
      on:
        include:
          - "~DEFAULT_BRANCH"
      rules:
        - ruletype: pull_request
          parameters:
            requiredApprovingReviewCount: 1
"""

import logging
import posixpath
from collections import Counter
from collections.abc import Iterable
from enum import StrEnum
from typing import assert_never

from pydantic import Field

from org_config.entity import (
    Entity,
    SpecModel,
    is_hidden,
    parse_entity,
    read_entries,
    validate_header,
)
from org_config.errors import EntityError, EntityValidationError, LoadResult
from org_config.fs import FileSystem

log = logging.getLogger(__name__)

RULESET_KIND = "Ruleset"

BRANCH_SENTINEL_PREFIX = "~"
DEFAULT_BRANCH = "~DEFAULT_BRANCH"
ALL_BRANCHES = "~ALL"


class Enforcement(StrEnum):
    DISABLE = "disable"
    ACTIVE = "active"
    EVALUATE = "evaluate"


class BypassMode(StrEnum):
    ALWAYS = "always"
    PULL_REQUEST = "pull_request"


class RuleSetParameters(SpecModel):
    # pull_request
    dismiss_stale_reviews_on_push: bool = Field(
        False, alias="dismissStaleReviewsOnPush"
    )
    require_code_owner_review: bool = Field(False, alias="requireCodeOwnerReview")
    required_approving_review_count: int = Field(
        0, alias="requiredApprovingReviewCount"
    )
    required_review_thread_resolution: bool = Field(
        False, alias="requiredReviewThreadResolution"
    )
    require_last_push_approval: bool = Field(False, alias="requireLastPushApproval")

    # required_status_checks
    required_status_checks: list[str] = Field(
        default_factory=list, alias="requiredStatusChecks"
    )
    strict_required_status_checks_policy: bool = Field(
        False, alias="strictRequiredStatusChecksPolicy"
    )


def string_array_equivalent(
    left: Iterable[str], right: Iterable[str]
) -> tuple[bool, list[str], list[str]]:
    """Compare two lists of names ignoring their order.

    Returns:
        (equivalent, added, removed) where ``added`` holds the names only
        found in right and ``removed`` the names only found in left
    """
    left_count, right_count = Counter(left), Counter(right)
    added = sorted((right_count - left_count).elements())
    removed = sorted((left_count - right_count).elements())
    return not added and not removed, added, removed


def _pull_request_equivalent(left: RuleSetParameters, right: RuleSetParameters) -> bool:
    return (
        left.dismiss_stale_reviews_on_push == right.dismiss_stale_reviews_on_push
        and left.require_code_owner_review == right.require_code_owner_review
        and left.required_approving_review_count
        == right.required_approving_review_count
        and left.required_review_thread_resolution
        == right.required_review_thread_resolution
        and left.require_last_push_approval == right.require_last_push_approval
    )


def _required_status_checks_equivalent(
    left: RuleSetParameters, right: RuleSetParameters
) -> bool:
    equivalent, _, _ = string_array_equivalent(
        left.required_status_checks, right.required_status_checks
    )
    return (
        equivalent
        and left.strict_required_status_checks_policy
        == right.strict_required_status_checks_policy
    )


class RuleType(StrEnum):
    REQUIRED_SIGNATURES = "required_signatures"
    PULL_REQUEST = "pull_request"
    REQUIRED_STATUS_CHECKS = "required_status_checks"

    def equivalent(self, left: RuleSetParameters, right: RuleSetParameters) -> bool:
        match self:
            case RuleType.REQUIRED_SIGNATURES:
                # no parameters
                return True
            case RuleType.PULL_REQUEST:
                return _pull_request_equivalent(left, right)
            case RuleType.REQUIRED_STATUS_CHECKS:
                return _required_status_checks_equivalent(left, right)
            case _:
                assert_never(self)


def rules_equivalent(
    ruletype: str, left: RuleSetParameters, right: RuleSetParameters
) -> bool:
    """Whether two rule configurations enforce the same policy.

    Used to compare a desired rule with the one observed on GitHub. An
    unknown rule type is never equivalent.
    """
    try:
        rule_type = RuleType(ruletype)
    except ValueError:
        return False
    return rule_type.equivalent(left, right)


class BypassApp(SpecModel):
    app_name: str = Field("", alias="appname")
    mode: str = ""


class BranchSelection(SpecModel):
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)


class Rule(SpecModel):
    ruletype: str = ""
    parameters: RuleSetParameters = Field(default_factory=RuleSetParameters)


class RuleSetDefinition(SpecModel):
    enforcement: str = ""
    bypass_apps: list[BypassApp] = Field(default_factory=list, alias="bypassapps")
    on: BranchSelection = Field(default_factory=BranchSelection)
    rules: list[Rule] = Field(default_factory=list)


class RuleSet(Entity):
    spec: RuleSetDefinition = Field(default_factory=RuleSetDefinition)


def validate_ruleset(ruleset: RuleSet, path: str) -> None:
    """Raise EntityValidationError on the first problem found in ruleset."""
    validate_header(ruleset, path, RULESET_KIND, "ruleset")

    for rule in ruleset.spec.rules:
        if rule.ruletype not in set(RuleType):
            raise EntityValidationError(
                path, f"invalid ruletype: {rule.ruletype} for ruleset filename {path}"
            )

    if ruleset.spec.enforcement not in set(Enforcement):
        raise EntityValidationError(
            path,
            f"invalid enforcement: {ruleset.spec.enforcement} for ruleset filename {path}",
        )

    for app in ruleset.spec.bypass_apps:
        if app.mode not in set(BypassMode):
            raise EntityValidationError(
                path,
                f"invalid mode: {app.mode} for bypassapp {app.app_name} in ruleset filename {path}",
            )

    for include in ruleset.spec.on.include:
        if include.startswith(BRANCH_SENTINEL_PREFIX) and include not in {
            DEFAULT_BRANCH,
            ALL_BRANCHES,
        }:
            raise EntityValidationError(
                path, f"invalid include: {include} in ruleset filename {path}"
            )


def read_ruleset_directory(fs: FileSystem, dirname: str) -> LoadResult[RuleSet]:
    """Read every ruleset file directly under dirname.

    Sub-directories and hidden files are skipped. A ruleset whose name is
    already loaded replaces the earlier one.
    """
    result: LoadResult[RuleSet] = LoadResult()
    try:
        entries = read_entries(fs, dirname)
    except EntityError as e:
        result.errors.append(e)
        return result
    if entries is None:
        log.debug(f"no rulesets directory {dirname}")
        return result

    for entry in entries:
        path = posixpath.join(dirname, entry.name)
        if entry.is_dir or is_hidden(entry.name):
            log.debug(f"skipping {path}")
            continue
        try:
            ruleset = parse_entity(fs, path, RuleSet)
            validate_ruleset(ruleset, path)
        except EntityError as e:
            result.errors.append(e)
            continue
        if ruleset.name in result.entities:
            log.debug(f"ruleset {ruleset.name} redefined by {path}")
        result.entities[ruleset.name] = ruleset

    return result
