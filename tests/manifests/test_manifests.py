"""Tests for the bootstrap manifests asset."""

import base64
import dataclasses
import json

import pytest
import yaml

from installer_assets import tls
from installer_assets.exceptions import DependencyResolutionError, RenderError
from installer_assets.kubeconfig import AdminKubeconfig
from installer_assets.ignition import WorkerIgnition
from installer_assets.installconfig import InstallConfig
from installer_assets.manifests import manifests as manifests_module
from installer_assets.manifests.configmap import ConfigurationObject
from installer_assets.manifests.manifests import (
    BOOTKUBE_MANIFESTS,
    BootkubeManifest,
    BootkubeTemplateData,
    Manifests,
)
from installer_assets.manifests.operators import (
    KubeAddonOperator,
    KubeCoreOperator,
    MachineAPIOperator,
    NetworkOperator,
)
from installer_assets.resolver import Resolver
from installer_assets.store import InMemoryAssetStore, Status, StoreEvent
from installer_assets.template import Template, TemplateRenderer

CLUSTER_ID = "9d1bd1d8-2a5e-4c4e-b1c7-5c3f2b5d6e1a"

EXPECTED_FILENAMES = [
    "manifests/cluster-config.yaml",
    "tectonic/cluster-config.yaml",
    "manifests/cluster-apiserver-certs.yaml",
    "manifests/ign-config.yaml",
    "manifests/kube-apiserver-secret.yaml",
    "manifests/kube-cloud-config.yaml",
    "manifests/kube-controller-manager-secret.yaml",
    "manifests/machine-config-server-tls-secret.yaml",
    "manifests/openshift-apiserver-secret.yaml",
    "manifests/pull.json",
    "manifests/tectonic-network-operator.yaml",
    "manifests/cvo-overrides.yaml",
    "manifests/01-tectonic-namespace.yaml",
    "manifests/02-ingress-namespace.yaml",
    "manifests/03-openshift-web-console-namespace.yaml",
    "manifests/04-openshift-machine-config-operator.yaml",
    "manifests/05-openshift-cluster-api-namespace.yaml",
    "manifests/app-version-kind.yaml",
    "manifests/app-version-mao.yaml",
    "manifests/app-version-tectonic-network.yaml",
    "manifests/machine-config-operator-01-images-configmap.yaml",
    "manifests/operatorstatus-crd.yaml",
]


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


def _files(manifests: Manifests) -> dict[str, bytes]:
    return {generated.filename: generated.data for generated in manifests.files()}


@pytest.fixture(name="manifests")
def manifests_fixture(seeded_store: InMemoryAssetStore) -> Manifests:
    """Fixture for the manifests generated from the seeded store."""
    return Resolver(seeded_store).resolve(Manifests)


def test_filenames(manifests: Manifests) -> None:
    """Test the manifests asset writes every expected file once, in order."""
    filenames = [generated.filename for generated in manifests.files()]
    assert filenames == EXPECTED_FILENAMES
    assert len(set(filenames)) == len(filenames)


def test_kube_system_config_map(
    seeded_store: InMemoryAssetStore, manifests: Manifests
) -> None:
    """Test the kube-system config map aggregates the operator configs."""
    record = ConfigurationObject.parse_yaml(_files(manifests)["manifests/cluster-config.yaml"])

    assert record.metadata.namespace == "kube-system"
    assert record.metadata.name == "cluster-config-v1"
    assert sorted(record.data) == [
        "install-config",
        "kco-config",
        "mao-config",
        "network-config",
    ]
    for key, asset_type in (
        ("kco-config", KubeCoreOperator),
        ("network-config", NetworkOperator),
        ("mao-config", MachineAPIOperator),
    ):
        asset = seeded_store.get_asset(asset_type)
        assert asset is not None
        assert record.data[key] == asset.data.decode()

    install_config = seeded_store.get_asset(InstallConfig)
    assert install_config is not None
    assert record.data["install-config"] == install_config.config.yaml()


def test_tectonic_system_config_map(
    seeded_store: InMemoryAssetStore, manifests: Manifests
) -> None:
    """Test the tectonic-system config map holds the addon config."""
    record = ConfigurationObject.parse_yaml(_files(manifests)["tectonic/cluster-config.yaml"])

    addon = seeded_store.get_asset(KubeAddonOperator)
    assert addon is not None
    assert record.metadata.namespace == "tectonic-system"
    assert record.metadata.name == "cluster-config-v1"
    assert record.data == {"addon-config": addon.data.decode()}


def test_secrets_are_base64_encoded(manifests: Manifests) -> None:
    """Test certificate material is written base64 encoded."""
    files = _files(manifests)

    apiserver = yaml.safe_load(files["manifests/kube-apiserver-secret.yaml"])
    assert apiserver["data"]["apiserver.crt"] == _b64(b"APIServerCertKey-cert")
    assert apiserver["data"]["apiserver.key"] == _b64(b"APIServerCertKey-key")
    assert apiserver["data"]["root-ca.crt"] == _b64(b"RootCA-cert")
    assert apiserver["data"]["service-account.pub"] == _b64(b"service-account-public")
    # The OIDC CA is the kube CA
    assert apiserver["data"]["oidc-ca.crt"] == _b64(b"KubeCA-cert")

    controller_manager = yaml.safe_load(
        files["manifests/kube-controller-manager-secret.yaml"]
    )
    assert controller_manager["data"]["service-account.key"] == _b64(
        b"service-account-private"
    )

    mcs = yaml.safe_load(files["manifests/machine-config-server-tls-secret.yaml"])
    assert mcs["data"] == {
        "tls.crt": _b64(b"MCSCertKey-cert"),
        "tls.key": _b64(b"MCSCertKey-key"),
    }

    cluster_apiserver = yaml.safe_load(files["manifests/cluster-apiserver-certs.yaml"])
    assert cluster_apiserver["data"] == {
        "tls.crt": _b64(b"ClusterAPIServerCertKey-cert"),
        "tls.key": _b64(b"ClusterAPIServerCertKey-key"),
    }


def test_embedded_assets(seeded_store: InMemoryAssetStore, manifests: Manifests) -> None:
    """Test generated configs embedded in secrets match their own files."""
    files = _files(manifests)
    kubeconfig = seeded_store.get_asset(AdminKubeconfig)
    ignition = seeded_store.get_asset(WorkerIgnition)
    assert kubeconfig is not None
    assert ignition is not None

    openshift = yaml.safe_load(files["manifests/openshift-apiserver-secret.yaml"])
    assert base64.b64decode(openshift["data"]["openshift-loopback-kubeconfig"]) == (
        kubeconfig.files()[0].data
    )

    ign_config = yaml.safe_load(files["manifests/ign-config.yaml"])
    assert base64.b64decode(ign_config["data"]["userData"]) == ignition.files()[0].data


def test_pull_secret(manifests: Manifests) -> None:
    """Test the pull secret manifest is valid JSON with the encoded secret."""
    doc = json.loads(_files(manifests)["manifests/pull.json"])
    assert doc["type"] == "kubernetes.io/dockerconfigjson"
    assert json.loads(base64.b64decode(doc["data"][".dockerconfigjson"])) == {
        "auths": {"quay.io": {"auth": "c2VjcmV0"}}
    }


def test_cloud_config_is_empty(manifests: Manifests) -> None:
    """Test the cloud provider config is empty."""
    doc = yaml.safe_load(_files(manifests)["manifests/kube-cloud-config.yaml"])
    assert doc["data"]["config"] == ""


def test_cluster_id_is_shared(manifests: Manifests) -> None:
    """Test the cluster version and machine API configs share the cluster id."""
    files = _files(manifests)
    cvo = yaml.safe_load(files["manifests/cvo-overrides.yaml"])
    assert cvo["clusterID"] == CLUSTER_ID

    record = ConfigurationObject.parse_yaml(files["manifests/cluster-config.yaml"])
    assert yaml.safe_load(record.data["mao-config"])["clusterID"] == CLUSTER_ID


def test_network_operator_image(manifests: Manifests) -> None:
    """Test the network operator uses the pinned image."""
    doc = yaml.safe_load(_files(manifests)["manifests/tectonic-network-operator.yaml"])
    (container,) = doc["spec"]["template"]["spec"]["containers"]
    assert container["image"] == manifests_module.TECTONIC_NETWORK_OPERATOR_IMAGE


def test_static_manifests_copied(manifests: Manifests) -> None:
    """Test static catalog entries are written unchanged."""
    files = _files(manifests)
    static = [entry for entry in BOOTKUBE_MANIFESTS if not entry.templated]
    assert len(static) == 10
    for entry in static:
        assert isinstance(entry.content, str)
        assert files[f"manifests/{entry.filename}"] == entry.content.encode()


def test_all_manifests_parse(manifests: Manifests) -> None:
    """Test every written manifest is a parseable document."""
    for filename, data in _files(manifests).items():
        assert yaml.safe_load(data), filename


def test_catalog_fields_are_provided() -> None:
    """Test every templated catalog entry only references known fields."""
    renderer = TemplateRenderer()
    known = {field.name for field in dataclasses.fields(BootkubeTemplateData)}
    templated = [entry for entry in BOOTKUBE_MANIFESTS if entry.templated]
    assert len(templated) == 10
    for entry in templated:
        assert isinstance(entry.content, Template)
        assert renderer.undeclared_fields(entry.content) <= known, entry.filename


def test_deterministic(seeded_store: InMemoryAssetStore) -> None:
    """Test two passes over identical seeded inputs write identical files."""
    store = InMemoryAssetStore()
    for asset in seeded_store.list_assets():
        store.add_asset(asset)

    first = Resolver(seeded_store).resolve(Manifests)
    second = Resolver(store).resolve(Manifests)

    assert first is not second
    assert first.files() == second.files()


def test_request_again(seeded_store: InMemoryAssetStore) -> None:
    """Test requesting the manifests again reuses the generated asset."""
    resolver = Resolver(seeded_store)
    first = resolver.resolve(Manifests)
    added: list[str] = []
    seeded_store.add_listener(
        StoreEvent.ASSET_ADDED,
        lambda _, asset: added.append(asset.name()),
    )
    assert resolver.resolve(Manifests) is first
    assert added == []


def test_render_failure(
    seeded_store: InMemoryAssetStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test a template referencing an unknown field aborts generation."""
    monkeypatch.setattr(
        manifests_module,
        "BOOTKUBE_MANIFESTS",
        (
            BootkubeManifest(
                "broken.yaml", Template(name="broken", body="value: {{ kube_ca_crt }}\n")
            ),
        ),
    )

    with pytest.raises(
        DependencyResolutionError, match="Failed to generate asset Common Manifests"
    ) as exc_info:
        Resolver(seeded_store).resolve(Manifests)

    assert isinstance(exc_info.value.__cause__, RenderError)
    assert exc_info.value.__cause__.template_name == "broken"
    assert seeded_store.get_asset(Manifests) is None
    status = seeded_store.get_status(Manifests)
    assert status is not None
    assert status.status == Status.FAILED


def test_declared_dependencies() -> None:
    """Test the manifests depend on the operator configs, PKI and kubeconfig."""
    assert Manifests().dependencies() == [
        InstallConfig,
        KubeCoreOperator,
        NetworkOperator,
        KubeAddonOperator,
        MachineAPIOperator,
        tls.RootCA,
        tls.EtcdCA,
        tls.IngressCertKey,
        tls.KubeCA,
        tls.AggregatorCA,
        tls.ServiceServingCA,
        tls.ClusterAPIServerCertKey,
        tls.EtcdClientCertKey,
        tls.APIServerCertKey,
        tls.OpenshiftAPIServerCertKey,
        tls.APIServerProxyCertKey,
        tls.MCSCertKey,
        tls.KubeletCertKey,
        tls.ServiceAccountKeyPair,
        AdminKubeconfig,
        WorkerIgnition,
    ]
