"""The manifests applied to the cluster when the control plane bootstraps.

`Manifests` is the terminal asset of the graph. It writes:

- `manifests/cluster-config.yaml`: the `kube-system/cluster-config-v1` config
  map holding the kube core, network and machine API operator configs and the
  install config.
- `tectonic/cluster-config.yaml`: the `tectonic-system/cluster-config-v1`
  config map holding the addon operator config.
- every entry of `BOOTKUBE_MANIFESTS` under `manifests/`, either rendered
  against a single `BootkubeTemplateData` record or copied unchanged.
"""

import base64
from dataclasses import dataclass
import logging

from installer_assets.asset import Asset, GeneratedFile, Parents, WritableAsset
from installer_assets.ignition import WorkerIgnition
from installer_assets.installconfig import InstallConfig
from installer_assets.kubeconfig import AdminKubeconfig
from installer_assets.template import Template, TemplateRenderer
from installer_assets.tls import (
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

from .configmap import config_map
from .content import bootkube
from .operators import (
    KubeAddonOperator,
    KubeCoreOperator,
    MachineAPIOperator,
    NetworkOperator,
)

__all__ = [
    "Manifests",
    "BootkubeTemplateData",
    "BootkubeManifest",
    "BOOTKUBE_MANIFESTS",
]

_LOGGER = logging.getLogger(__name__)

MANIFEST_DIR = "manifests"
TECTONIC_DIR = "tectonic"
CLUSTER_CONFIG_FILENAME = "cluster-config.yaml"
CLUSTER_CONFIG_NAME = "cluster-config-v1"
KUBE_SYSTEM_NAMESPACE = "kube-system"
TECTONIC_SYSTEM_NAMESPACE = "tectonic-system"
TECTONIC_NETWORK_OPERATOR_IMAGE = (
    "quay.io/coreos/tectonic-network-operator-dev:"
    "3b6952f5a1ba89bb32dd0630faddeaf2779c9a85"
)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


@dataclass(frozen=True)
class BootkubeTemplateData:
    """Substitution values shared by all bootkube templates.

    Binary values are base64 encoded; the cluster id and image reference are
    plain text.
    """

    aggregator_ca_cert: str
    aggregator_ca_key: str
    apiserver_cert: str
    apiserver_key: str
    apiserver_proxy_cert: str
    apiserver_proxy_key: str
    base64_encode_cloud_provider_config: str
    clusterapi_ca_cert: str
    clusterapi_ca_key: str
    etcd_ca_cert: str
    etcd_client_cert: str
    etcd_client_key: str
    kube_ca_cert: str
    kube_ca_key: str
    mcs_tls_cert: str
    mcs_tls_key: str
    oidc_ca_cert: str
    openshift_apiserver_cert: str
    openshift_apiserver_key: str
    openshift_loopback_kubeconfig: str
    pull_secret: str
    root_ca_cert: str
    serviceaccount_key: str
    serviceaccount_pub: str
    service_serving_ca_cert: str
    service_serving_ca_key: str
    tectonic_network_operator_image: str
    worker_ign_config: str
    cvo_cluster_id: str


@dataclass(frozen=True)
class BootkubeManifest:
    """An entry of the bootkube manifest catalog."""

    filename: str
    """Name of the file under the manifests directory."""

    content: Template | str
    """A template rendered against the template data, or static content."""

    @property
    def templated(self) -> bool:
        """Whether the content is rendered rather than copied."""
        return isinstance(self.content, Template)


BOOTKUBE_MANIFESTS: tuple[BootkubeManifest, ...] = (
    BootkubeManifest("cluster-apiserver-certs.yaml", bootkube.CLUSTER_APISERVER_CERTS),
    BootkubeManifest("ign-config.yaml", bootkube.IGN_CONFIG),
    BootkubeManifest("kube-apiserver-secret.yaml", bootkube.KUBE_APISERVER_SECRET),
    BootkubeManifest("kube-cloud-config.yaml", bootkube.KUBE_CLOUD_CONFIG),
    BootkubeManifest(
        "kube-controller-manager-secret.yaml", bootkube.KUBE_CONTROLLER_MANAGER_SECRET
    ),
    BootkubeManifest(
        "machine-config-server-tls-secret.yaml",
        bootkube.MACHINE_CONFIG_SERVER_TLS_SECRET,
    ),
    BootkubeManifest(
        "openshift-apiserver-secret.yaml", bootkube.OPENSHIFT_APISERVER_SECRET
    ),
    BootkubeManifest("pull.json", bootkube.PULL),
    BootkubeManifest(
        "tectonic-network-operator.yaml", bootkube.TECTONIC_NETWORK_OPERATOR
    ),
    BootkubeManifest("cvo-overrides.yaml", bootkube.CVO_OVERRIDES),
    BootkubeManifest("01-tectonic-namespace.yaml", bootkube.TECTONIC_NAMESPACE),
    BootkubeManifest("02-ingress-namespace.yaml", bootkube.INGRESS_NAMESPACE),
    BootkubeManifest(
        "03-openshift-web-console-namespace.yaml",
        bootkube.OPENSHIFT_WEB_CONSOLE_NAMESPACE,
    ),
    BootkubeManifest(
        "04-openshift-machine-config-operator.yaml",
        bootkube.OPENSHIFT_MACHINE_CONFIG_OPERATOR,
    ),
    BootkubeManifest(
        "05-openshift-cluster-api-namespace.yaml",
        bootkube.OPENSHIFT_CLUSTER_API_NAMESPACE,
    ),
    BootkubeManifest("app-version-kind.yaml", bootkube.APP_VERSION_KIND),
    BootkubeManifest("app-version-mao.yaml", bootkube.APP_VERSION_MAO),
    BootkubeManifest(
        "app-version-tectonic-network.yaml", bootkube.APP_VERSION_TECTONIC_NETWORK
    ),
    BootkubeManifest(
        "machine-config-operator-01-images-configmap.yaml",
        bootkube.MACHINE_CONFIG_OPERATOR_01_IMAGES_CONFIGMAP,
    ),
    BootkubeManifest("operatorstatus-crd.yaml", bootkube.OPERATORSTATUS_CRD),
)


class Manifests(WritableAsset):
    """The cluster config maps and bootkube manifests for the control plane."""

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        """Initialize Manifests."""
        self._renderer = renderer or TemplateRenderer()
        self._files: list[GeneratedFile] | None = None

    def name(self) -> str:
        return "Common Manifests"

    def dependencies(self) -> list[type[Asset]]:
        return [
            InstallConfig,
            KubeCoreOperator,
            NetworkOperator,
            KubeAddonOperator,
            MachineAPIOperator,
            RootCA,
            EtcdCA,
            IngressCertKey,
            KubeCA,
            AggregatorCA,
            ServiceServingCA,
            ClusterAPIServerCertKey,
            EtcdClientCertKey,
            APIServerCertKey,
            OpenshiftAPIServerCertKey,
            APIServerProxyCertKey,
            MCSCertKey,
            KubeletCertKey,
            ServiceAccountKeyPair,
            AdminKubeconfig,
            WorkerIgnition,
        ]

    def generate(self, parents: Parents) -> None:
        """Compose the cluster config maps and render the bootkube manifests."""
        kco = parents.get(KubeCoreOperator)
        network = parents.get(NetworkOperator)
        addon = parents.get(KubeAddonOperator)
        mao = parents.get(MachineAPIOperator)
        install_config = parents.get(InstallConfig)

        # kco, network and mao go to the kube-system config map
        kube_sys_config = config_map(
            KUBE_SYSTEM_NAMESPACE,
            CLUSTER_CONFIG_NAME,
            {
                "kco-config": kco.data.decode(),
                "network-config": network.data.decode(),
                "install-config": install_config.files()[0].data.decode(),
                "mao-config": mao.data.decode(),
            },
        )
        # addon goes to the tectonic system config map
        tectonic_config = config_map(
            TECTONIC_SYSTEM_NAMESPACE,
            CLUSTER_CONFIG_NAME,
            {"addon-config": addon.data.decode()},
        )

        files = [
            GeneratedFile(
                f"{MANIFEST_DIR}/{CLUSTER_CONFIG_FILENAME}", kube_sys_config.yaml()
            ),
            GeneratedFile(
                f"{TECTONIC_DIR}/{CLUSTER_CONFIG_FILENAME}", tectonic_config.yaml()
            ),
        ]
        files.extend(self._bootkube_manifests(template_data(parents)))
        self._files = files

    def _bootkube_manifests(
        self, data: BootkubeTemplateData
    ) -> list[GeneratedFile]:
        files = []
        for manifest in BOOTKUBE_MANIFESTS:
            if isinstance(manifest.content, Template):
                content = self._renderer.render(manifest.content, data)
            else:
                content = manifest.content.encode()
            files.append(GeneratedFile(f"{MANIFEST_DIR}/{manifest.filename}", content))
        _LOGGER.debug("Generated %d bootkube manifests", len(files))
        return files

    def files(self) -> list[GeneratedFile]:
        return self._require(self._files)


def template_data(parents: Parents) -> BootkubeTemplateData:
    """Build the bootkube template data from the generated dependencies."""
    install_config = parents.get(InstallConfig).config
    aggregator_ca = parents.get(AggregatorCA)
    apiserver = parents.get(APIServerCertKey)
    apiserver_proxy = parents.get(APIServerProxyCertKey)
    cluster_apiserver = parents.get(ClusterAPIServerCertKey)
    etcd_ca = parents.get(EtcdCA)
    etcd_client = parents.get(EtcdClientCertKey)
    kube_ca = parents.get(KubeCA)
    mcs = parents.get(MCSCertKey)
    openshift_apiserver = parents.get(OpenshiftAPIServerCertKey)
    admin_kubeconfig = parents.get(AdminKubeconfig)
    root_ca = parents.get(RootCA)
    service_account = parents.get(ServiceAccountKeyPair)
    service_serving_ca = parents.get(ServiceServingCA)
    worker_ignition = parents.get(WorkerIgnition)

    return BootkubeTemplateData(
        aggregator_ca_cert=_b64(aggregator_ca.cert()),
        aggregator_ca_key=_b64(aggregator_ca.key()),
        apiserver_cert=_b64(apiserver.cert()),
        apiserver_key=_b64(apiserver.key()),
        apiserver_proxy_cert=_b64(apiserver_proxy.cert()),
        apiserver_proxy_key=_b64(apiserver_proxy.key()),
        # No platform currently supplies a cloud provider config
        base64_encode_cloud_provider_config="",
        clusterapi_ca_cert=_b64(cluster_apiserver.cert()),
        clusterapi_ca_key=_b64(cluster_apiserver.key()),
        etcd_ca_cert=_b64(etcd_ca.cert()),
        etcd_client_cert=_b64(etcd_client.cert()),
        etcd_client_key=_b64(etcd_client.key()),
        kube_ca_cert=_b64(kube_ca.cert()),
        kube_ca_key=_b64(kube_ca.key()),
        mcs_tls_cert=_b64(mcs.cert()),
        mcs_tls_key=_b64(mcs.key()),
        oidc_ca_cert=_b64(kube_ca.cert()),
        openshift_apiserver_cert=_b64(openshift_apiserver.cert()),
        openshift_apiserver_key=_b64(openshift_apiserver.key()),
        openshift_loopback_kubeconfig=_b64(admin_kubeconfig.files()[0].data),
        pull_secret=_b64(install_config.pull_secret.encode()),
        root_ca_cert=_b64(root_ca.cert()),
        serviceaccount_key=_b64(service_account.private()),
        serviceaccount_pub=_b64(service_account.public()),
        service_serving_ca_cert=_b64(service_serving_ca.cert()),
        service_serving_ca_key=_b64(service_serving_ca.key()),
        tectonic_network_operator_image=TECTONIC_NETWORK_OPERATOR_IMAGE,
        worker_ign_config=_b64(worker_ignition.files()[0].data),
        cvo_cluster_id=install_config.cluster_id,
    )
