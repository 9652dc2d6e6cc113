"""Library for the named targets that can be generated from the command line."""

from argparse import ArgumentParser

from installer_assets.asset import WritableAsset
from installer_assets.ignition import WorkerIgnition
from installer_assets.installconfig import InstallConfig
from installer_assets.kubeconfig import AdminKubeconfig
from installer_assets.manifests import Manifests
from installer_assets.tls import (
    AdminCertKey,
    AggregatorCA,
    APIServerCertKey,
    APIServerProxyCertKey,
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

TARGETS: dict[str, list[type[WritableAsset]]] = {
    "install-config": [InstallConfig],
    "tls": [
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
        ServiceAccountKeyPair,
    ],
    "kubeconfig": [AdminKubeconfig],
    "ignition": [WorkerIgnition],
    "manifests": [Manifests],
}


def add_target_flag(args: ArgumentParser) -> None:
    """Add the positional target argument to the arguments object."""
    args.add_argument(
        "target",
        choices=list(TARGETS),
        help="The set of assets to operate on",
    )
