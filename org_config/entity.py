"""Common header of every configuration object and the generic file parser."""

import posixpath
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from ruamel.yaml.error import YAMLError

from org_config.errors import EntityParseError, EntityReadError, EntityValidationError
from org_config.fs import DirEntry, FileSystem
from org_config.ruamel import load_document

API_VERSION = "v1"
YAML_EXTENSION = ".yaml"

E = TypeVar("E", bound="Entity")


class SpecModel(BaseModel):
    """Base for every model deserialized from a configuration file.

    Keys without a value (``writers:``) are treated as absent so the field
    keeps its default. Unknown keys are ignored. Numbers given for string
    fields (``name: 2048``) are read as their text.
    """

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_null_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Entity(SpecModel):
    api_version: str = Field("", alias="apiVersion")
    kind: str = ""
    name: str = ""


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def file_stem(path: str) -> str:
    """Base name of path without its extension: ``teams/a/repo.yaml`` -> ``repo``."""
    return posixpath.splitext(posixpath.basename(path))[0]


def parse_entity(fs: FileSystem, path: str, model: type[E]) -> E:
    """Read path and deserialize it into model.

    No business validation is performed, the returned entity still has to be
    validated by its ``validate`` method.

    Raises:
        EntityReadError: If the file can not be read
        EntityParseError: If the content is not a valid document for model
    """
    try:
        content = fs.read_file(path)
    except OSError as e:
        raise EntityReadError(path, e) from e

    try:
        data = load_document(content)
    except (YAMLError, UnicodeDecodeError) as e:
        raise EntityParseError(path, e) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise EntityParseError(
            path, f"document root must be a mapping, got {type(data).__name__}"
        )

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise EntityParseError(path, e) from e


def validate_header(
    entity: Entity,
    path: str,
    kind: str,
    label: str,
    expected_name: str | None = None,
) -> None:
    """Fail-fast checks shared by every entity type.

    The name must match expected_name, by default the file name without
    its extension.

    Raises:
        EntityValidationError: On the first header field that is not valid
    """
    if entity.api_version != API_VERSION:
        raise EntityValidationError(
            path, f"invalid apiVersion: {entity.api_version} for {label} filename {path}"
        )
    if entity.kind != kind:
        raise EntityValidationError(
            path, f"invalid kind: {entity.kind} for {label} filename {path}"
        )
    if not entity.name:
        raise EntityValidationError(path, f"name is empty for {label} filename {path}")
    if entity.name != (expected_name or file_stem(path)):
        raise EntityValidationError(
            path, f"invalid name: {entity.name} for {label} filename {path}"
        )


def read_entries(fs: FileSystem, dirname: str) -> list[DirEntry] | None:
    """List dirname, or return None if it does not exist.

    A missing directory is not an error, an organization may simply not use it.

    Raises:
        EntityReadError: If the directory exists but can not be listed
    """
    try:
        if not fs.exists(dirname):
            return None
        return fs.read_dir(dirname)
    except OSError as e:
        raise EntityReadError(dirname, e) from e
