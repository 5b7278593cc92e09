import os
from textwrap import dedent


class Fixtures:
    def __init__(self, base_path: str):
        self.base_path = base_path

    def path(self, fixture: str = "") -> str:
        return os.path.join(
            os.path.dirname(__file__), "fixtures", self.base_path, fixture
        )

    def get(self, fixture: str) -> str:
        with open(self.path(fixture), encoding="utf-8") as f:
            return f.read().strip()


def repository_yaml(name: str, spec: str = "", kind: str = "Repository") -> str:
    """Repository document with spec given as a dedented YAML block."""
    doc = f"apiVersion: v1\nkind: {kind}\nname: {name}\n"
    if spec:
        doc += "spec:\n" + "".join(
            f"  {line}\n" for line in dedent(spec).strip().splitlines()
        )
    return doc
