"""Load and validate a directory tree of GitHub organization definitions.

Teams, repositories, rulesets and external collaborators are described as
YAML files. The readers in this package turn such a tree into validated
pydantic models plus a list of errors and warnings.
"""
