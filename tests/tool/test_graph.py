"""Tests for the graph command."""

import pytest
import yaml

from installer_assets.tool.installer_assets import main


def test_graph_table(capsys: pytest.CaptureFixture[str]) -> None:
    """Test printing the generation order of a target as a table."""
    main(["graph", "kubeconfig"])

    assert capsys.readouterr().out.splitlines() == [
        "NAME                DEPENDENCIES",
        "Root CA             -",
        "Kube CA             Root CA",
        "Admin Cert          Kube CA",
        "Install Config      -",
        "Kubeconfig Admin    Root CA, Admin Cert, Install Config",
    ]


def test_graph_yaml(capsys: pytest.CaptureFixture[str]) -> None:
    """Test printing the generation order of a target as yaml."""
    main(["graph", "ignition", "-o", "yaml"])

    assert yaml.safe_load(capsys.readouterr().out) == [
        {"name": "Install Config", "dependencies": []},
        {"name": "Root CA", "dependencies": []},
        {"name": "Worker Ignition Config", "dependencies": ["Install Config", "Root CA"]},
    ]


def test_graph_manifests(capsys: pytest.CaptureFixture[str]) -> None:
    """Test the manifests are generated after all of their dependencies."""
    main(["graph", "manifests", "--output", "yaml"])

    results = yaml.safe_load(capsys.readouterr().out)
    names = [result["name"] for result in results]
    assert names[-1] == "Common Manifests"
    assert len(names) == len(set(names))
    for position, result in enumerate(results):
        for dependency in result["dependencies"]:
            assert names.index(dependency) < position
