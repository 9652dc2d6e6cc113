"""Shared fixtures for installer-assets tests."""

from pathlib import Path

import pytest

from installer_assets.installconfig import InstallConfig, InstallConfigSpec
from installer_assets.store import InMemoryAssetStore
from installer_assets.tls import (
    AdminCertKey,
    AggregatorCA,
    APIServerCertKey,
    APIServerProxyCertKey,
    CertKey,
    ClusterAPIServerCertKey,
    EtcdCA,
    EtcdClientCertKey,
    IngressCertKey,
    KubeCA,
    KubeletCertKey,
    MCSCertKey,
    OpenshiftAPIServerCertKey,
    RootCA,
    ServiceAccountKeyPair,
    ServiceServingCA,
)

INSTALL_CONFIG_PATH = Path("tests/testdata/install-config.yaml")

CERT_KEY_TYPES: list[type[CertKey]] = [
    RootCA,
    EtcdCA,
    KubeCA,
    AggregatorCA,
    ServiceServingCA,
    EtcdClientCertKey,
    APIServerCertKey,
    OpenshiftAPIServerCertKey,
    APIServerProxyCertKey,
    ClusterAPIServerCertKey,
    IngressCertKey,
    MCSCertKey,
    KubeletCertKey,
    AdminCertKey,
]


def fake_cert(asset_type: type[CertKey]) -> bytes:
    """Fixed certificate bytes used in place of generated material."""
    return f"{asset_type.__name__}-cert".encode()


def fake_key(asset_type: type[CertKey]) -> bytes:
    """Fixed key bytes used in place of generated material."""
    return f"{asset_type.__name__}-key".encode()


FAKE_SA_PUBLIC = b"service-account-public"
FAKE_SA_PRIVATE = b"service-account-private"


@pytest.fixture(name="install_config_spec")
def install_config_spec_fixture() -> InstallConfigSpec:
    """Fixture for the parsed test install config."""
    return InstallConfigSpec.parse_yaml(INSTALL_CONFIG_PATH.read_text())


@pytest.fixture(name="install_config_store")
def install_config_store_fixture(
    install_config_spec: InstallConfigSpec,
) -> InMemoryAssetStore:
    """Fixture for a store seeded only with the install config."""
    store = InMemoryAssetStore()
    store.add_asset(InstallConfig(install_config_spec))
    return store


def seed_pki(store: InMemoryAssetStore) -> None:
    """Seed the store with fixed bytes for every TLS asset."""
    for asset_type in CERT_KEY_TYPES:
        store.add_asset(asset_type(cert=fake_cert(asset_type), key=fake_key(asset_type)))
    store.add_asset(ServiceAccountKeyPair(public=FAKE_SA_PUBLIC, private=FAKE_SA_PRIVATE))


@pytest.fixture(name="seeded_store")
def seeded_store_fixture(install_config_store: InMemoryAssetStore) -> InMemoryAssetStore:
    """Fixture for a store with the install config and fixed PKI material."""
    seed_pki(install_config_store)
    return install_config_store
