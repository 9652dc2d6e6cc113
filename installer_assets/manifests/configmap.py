"""Config map records that aggregate operator configuration."""

from dataclasses import dataclass, field
import logging
from typing import Any

import yaml
from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig
from mashumaro.exceptions import InvalidFieldValue, MissingField

from installer_assets.exceptions import CompositionError, InputException

__all__ = [
    "ConfigurationObject",
    "config_map",
]

_LOGGER = logging.getLogger(__name__)

CONFIG_MAP_KIND = "ConfigMap"


class _BlockStyleDumper(yaml.SafeDumper):
    """Dumper that writes multi-line strings as literal blocks."""


def _str_presenter(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    """Represent multi-line yaml strings as you'd expect.

    See https://github.com/yaml/pyyaml/issues/240
    """
    return dumper.represent_scalar(
        "tag:yaml.org,2002:str", data, style="|" if data.count("\n") > 0 else None
    )


_BlockStyleDumper.add_representer(str, _str_presenter)


@dataclass
class ObjectMeta(DataClassDictMixin):
    """Identity of a kubernetes object."""

    name: str
    namespace: str | None = None

    class Config(BaseConfig):
        omit_none = True


@dataclass
class ConfigurationObject(DataClassDictMixin):
    """A config map holding opaque string values keyed by name."""

    metadata: ObjectMeta

    data: dict[str, str] = field(default_factory=dict)
    """The config map entries. Keys are unique and order is not significant."""

    api_version: str = field(metadata=field_options(alias="apiVersion"), default="v1")

    kind: str = CONFIG_MAP_KIND

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True

    @property
    def namespaced_name(self) -> str:
        """Return the namespace and name concatenated as an id."""
        return f"{self.metadata.namespace}/{self.metadata.name}"

    def yaml(self) -> bytes:
        """Serialize the record as a YAML document with sorted keys."""
        try:
            content = yaml.dump(
                self.to_dict(), Dumper=_BlockStyleDumper, sort_keys=True
            )
        except yaml.YAMLError as err:
            raise CompositionError(
                f"failed to create {self.namespaced_name} configmap: {err}"
            ) from err
        return content.encode()

    @classmethod
    def parse_yaml(cls, content: bytes | str) -> "ConfigurationObject":
        """Parse a serialized config map."""
        doc: Any = yaml.safe_load(content)
        if not isinstance(doc, dict):
            raise InputException(f"Invalid config map: {doc!r}")
        try:
            return cls.from_dict(doc)
        except (MissingField, InvalidFieldValue) as err:
            raise InputException(f"Invalid config map: {err}") from err


def config_map(namespace: str, name: str, data: dict[str, str]) -> ConfigurationObject:
    """Create a config map record in the given namespace."""
    _LOGGER.debug("Composing configmap %s/%s with keys %s", namespace, name, sorted(data))
    return ConfigurationObject(
        metadata=ObjectMeta(name=name, namespace=namespace), data=dict(data)
    )
