"""Tests for config map records."""

import pytest
import yaml

from installer_assets.exceptions import CompositionError, InputException
from installer_assets.manifests.configmap import ConfigurationObject, config_map


def test_config_map() -> None:
    """Test composing and serializing a config map."""
    record = config_map(
        "kube-system",
        "cluster-config-v1",
        {"b-config": "kind: B\n", "a-config": "single line"},
    )
    assert record.namespaced_name == "kube-system/cluster-config-v1"

    content = record.yaml()
    assert yaml.safe_load(content) == {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": "cluster-config-v1", "namespace": "kube-system"},
        "data": {"a-config": "single line", "b-config": "kind: B\n"},
    }
    assert content.index(b"a-config") < content.index(b"b-config")
    assert b"b-config: |\n    kind: B\n" in content


def test_serialization_ignores_insertion_order() -> None:
    """Test equal records serialize to equal bytes."""
    first = config_map("ns", "name", {"x": "1", "y": "2"})
    second = config_map("ns", "name", {"y": "2", "x": "1"})
    assert first.yaml() == second.yaml()


def test_parse_yaml() -> None:
    """Test reading a serialized config map back."""
    record = config_map("tectonic-system", "cluster-config-v1", {"addon-config": "a: b\n"})
    parsed = ConfigurationObject.parse_yaml(record.yaml())
    assert parsed == record


def test_parse_invalid() -> None:
    """Test reading an invalid config map."""
    with pytest.raises(InputException):
        ConfigurationObject.parse_yaml("just a string")
    with pytest.raises(InputException):
        ConfigurationObject.parse_yaml("kind: ConfigMap\n")


def test_unserializable_value() -> None:
    """Test a value that cannot be serialized reports the config map."""
    record = config_map("ns", "name", {"bad": object()})  # type: ignore[dict-item]
    with pytest.raises(CompositionError, match="failed to create ns/name configmap"):
        record.yaml()
