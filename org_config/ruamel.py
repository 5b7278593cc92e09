from typing import Any

from ruamel import yaml


def create_ruamel_instance(pure: bool = False) -> yaml.YAML:
    """Round-trip loader that rejects a key defined twice in one mapping."""
    ruamel_instance = yaml.YAML(pure=pure)
    ruamel_instance.allow_duplicate_keys = False
    return ruamel_instance


def load_document(content: bytes) -> Any:
    """Deserialize one UTF-8 YAML document, None when it is empty.

    Raises:
        ruamel.yaml.error.YAMLError: On malformed content or duplicate keys
        UnicodeDecodeError: If content is not valid UTF-8
    """
    return create_ruamel_instance().load(content.decode("utf-8"))
