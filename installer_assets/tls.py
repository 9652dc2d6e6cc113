"""TLS assets: the certificate authorities and key pairs of the cluster.

All material is RSA keys and X.509 certificates in PEM encoding. The root
CA is self-signed; every other certificate is signed by the CA it declares as
a dependency:

    RootCA
    |-- EtcdCA            -> EtcdClientCertKey
    |-- KubeCA            -> APIServerCertKey, IngressCertKey,
    |                        KubeletCertKey, AdminCertKey
    |-- AggregatorCA      -> OpenshiftAPIServerCertKey, APIServerProxyCertKey,
    |                        ClusterAPIServerCertKey
    |-- ServiceServingCA
    `-- MCSCertKey

Any certificate asset may instead be seeded into the store with existing PEM
bytes, in which case it is never generated.
"""

from abc import abstractmethod
from dataclasses import dataclass
import datetime
from enum import Enum
import ipaddress
import logging
from typing import ClassVar

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from .asset import Asset, GeneratedFile, Parents, WritableAsset
from .installconfig import InstallConfig

__all__ = [
    "CertKey",
    "RootCA",
    "EtcdCA",
    "KubeCA",
    "AggregatorCA",
    "ServiceServingCA",
    "EtcdClientCertKey",
    "APIServerCertKey",
    "OpenshiftAPIServerCertKey",
    "APIServerProxyCertKey",
    "ClusterAPIServerCertKey",
    "IngressCertKey",
    "MCSCertKey",
    "KubeletCertKey",
    "AdminCertKey",
    "ServiceAccountKeyPair",
]

_LOGGER = logging.getLogger(__name__)

TLS_DIR = "tls"
KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537
VALIDITY_TEN_YEARS = datetime.timedelta(days=365 * 10)
VALIDITY_THIRTY_MINUTES = datetime.timedelta(minutes=30)
# Allow for clock skew between the installer and the cluster machines
BACKDATE = datetime.timedelta(minutes=1)


class CertUsage(Enum):
    """How a certificate is used."""

    CA = "ca"
    SERVER = "server"
    CLIENT = "client"
    SERVER_CLIENT = "server_client"


@dataclass(frozen=True)
class CertCfg:
    """The subject and extensions of a certificate to create."""

    common_name: str
    usage: CertUsage
    organization: str | None = None
    organizational_unit: str | None = None
    validity: datetime.timedelta = VALIDITY_TEN_YEARS
    dns_names: tuple[str, ...] = ()
    ip_addresses: tuple[str, ...] = ()
    is_ca: bool = False

    def subject(self) -> x509.Name:
        """Return the distinguished name of the certificate."""
        attributes = [x509.NameAttribute(NameOID.COMMON_NAME, self.common_name)]
        if self.organization:
            attributes.append(
                x509.NameAttribute(NameOID.ORGANIZATION_NAME, self.organization)
            )
        if self.organizational_unit:
            attributes.append(
                x509.NameAttribute(
                    NameOID.ORGANIZATIONAL_UNIT_NAME, self.organizational_unit
                )
            )
        return x509.Name(attributes)


def generate_private_key() -> rsa.RSAPrivateKey:
    """Create a new RSA private key."""
    return rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=KEY_SIZE)


def _key_usage(cfg: CertCfg) -> x509.KeyUsage:
    is_ca = cfg.is_ca or cfg.usage == CertUsage.CA
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=False,
        key_encipherment=not is_ca,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=is_ca,
        crl_sign=is_ca,
        encipher_only=False,
        decipher_only=False,
    )


def _extended_key_usage(cfg: CertCfg) -> x509.ExtendedKeyUsage | None:
    usages = {
        CertUsage.SERVER: [ExtendedKeyUsageOID.SERVER_AUTH],
        CertUsage.CLIENT: [ExtendedKeyUsageOID.CLIENT_AUTH],
        CertUsage.SERVER_CLIENT: [
            ExtendedKeyUsageOID.SERVER_AUTH,
            ExtendedKeyUsageOID.CLIENT_AUTH,
        ],
    }.get(cfg.usage)
    if usages is None:
        return None
    return x509.ExtendedKeyUsage(usages)


def _subject_alt_names(cfg: CertCfg) -> x509.SubjectAlternativeName | None:
    names: list[x509.GeneralName] = [x509.DNSName(name) for name in cfg.dns_names]
    names.extend(
        x509.IPAddress(ipaddress.ip_address(address)) for address in cfg.ip_addresses
    )
    if not names:
        return None
    return x509.SubjectAlternativeName(names)


def create_certificate(
    cfg: CertCfg,
    key: rsa.RSAPrivateKey,
    ca_cert: x509.Certificate | None = None,
    ca_key: rsa.RSAPrivateKey | None = None,
) -> x509.Certificate:
    """Create a certificate for the key, self-signed when no CA is given."""
    now = datetime.datetime.now(datetime.timezone.utc)
    issuer = ca_cert.subject if ca_cert is not None else cfg.subject()
    signing_key = ca_key if ca_key is not None else key
    is_ca = cfg.is_ca or cfg.usage == CertUsage.CA
    builder = (
        x509.CertificateBuilder()
        .subject_name(cfg.subject())
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - BACKDATE)
        .not_valid_after(now + cfg.validity)
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
        .add_extension(_key_usage(cfg), critical=True)
        .add_extension(
            x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False
        )
    )
    if ca_key is not None:
        builder = builder.add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(ca_key.public_key()),
            critical=False,
        )
    if (extended := _extended_key_usage(cfg)) is not None:
        builder = builder.add_extension(extended, critical=False)
    if (alt_names := _subject_alt_names(cfg)) is not None:
        builder = builder.add_extension(alt_names, critical=False)
    return builder.sign(signing_key, hashes.SHA256())


def private_key_to_pem(key: rsa.RSAPrivateKey) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


def public_key_to_pem(key: rsa.RSAPrivateKey) -> bytes:
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def cert_to_pem(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.PEM)


def _load_ca(ca: "CertKey") -> tuple[x509.Certificate, rsa.RSAPrivateKey]:
    """Parse the PEM material of a generated CA."""
    cert = x509.load_pem_x509_certificate(ca.cert())
    key = serialization.load_pem_private_key(ca.key(), password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ValueError(f"{ca.name()} key is not an RSA private key")
    return cert, key


class CertKey(WritableAsset):
    """Base class for an asset holding a certificate and its private key."""

    asset_name: ClassVar[str]
    """Human friendly name of the asset."""

    file_basename: ClassVar[str]
    """Base name of the files written under the tls directory."""

    def __init__(self, cert: bytes | None = None, key: bytes | None = None) -> None:
        """Initialize the asset, optionally with existing PEM material."""
        self._cert = cert
        self._key = key

    def name(self) -> str:
        return self.asset_name

    def cert(self) -> bytes:
        """The PEM encoded certificate."""
        return self._require(self._cert)

    def key(self) -> bytes:
        """The PEM encoded private key."""
        return self._require(self._key)

    def files(self) -> list[GeneratedFile]:
        return [
            GeneratedFile(f"{TLS_DIR}/{self.file_basename}.key", self.key()),
            GeneratedFile(f"{TLS_DIR}/{self.file_basename}.crt", self.cert()),
        ]


class RootCA(CertKey):
    """The self-signed root of trust for the cluster."""

    asset_name = "Root CA"
    file_basename = "root-ca"

    def dependencies(self) -> list[type[Asset]]:
        return []

    def generate(self, parents: Parents) -> None:
        cfg = CertCfg(
            common_name="root-ca",
            organizational_unit="openshift",
            usage=CertUsage.CA,
        )
        key = generate_private_key()
        self._cert = cert_to_pem(create_certificate(cfg, key))
        self._key = private_key_to_pem(key)


class SignedCertKey(CertKey):
    """A certificate signed by the CA named in `parent_ca`."""

    parent_ca: ClassVar[type[CertKey]]

    def dependencies(self) -> list[type[Asset]]:
        return [self.parent_ca]

    @abstractmethod
    def cert_config(self, parents: Parents) -> CertCfg:
        """Return the certificate to create."""

    def generate(self, parents: Parents) -> None:
        ca_cert, ca_key = _load_ca(parents.get(self.parent_ca))
        cfg = self.cert_config(parents)
        _LOGGER.debug("Signing certificate %s with %s", cfg.common_name, ca_cert.subject)
        key = generate_private_key()
        self._cert = cert_to_pem(create_certificate(cfg, key, ca_cert, ca_key))
        self._key = private_key_to_pem(key)


class EtcdCA(SignedCertKey):
    """The CA for etcd peers and clients."""

    asset_name = "Etcd CA"
    file_basename = "etcd-client-ca"
    parent_ca = RootCA

    def cert_config(self, parents: Parents) -> CertCfg:
        return CertCfg(common_name="etcd", organizational_unit="etcd", usage=CertUsage.CA)


class KubeCA(SignedCertKey):
    """The CA for the kubernetes API."""

    asset_name = "Kube CA"
    file_basename = "kube-ca"
    parent_ca = RootCA

    def cert_config(self, parents: Parents) -> CertCfg:
        return CertCfg(
            common_name="kube-ca", organizational_unit="bootkube", usage=CertUsage.CA
        )


class AggregatorCA(SignedCertKey):
    """The CA for the API aggregation layer."""

    asset_name = "Aggregator CA"
    file_basename = "aggregator-ca"
    parent_ca = RootCA

    def cert_config(self, parents: Parents) -> CertCfg:
        return CertCfg(
            common_name="aggregator", organizational_unit="bootkube", usage=CertUsage.CA
        )


class ServiceServingCA(SignedCertKey):
    """The CA that signs serving certificates for cluster services."""

    asset_name = "Service Serving CA"
    file_basename = "service-serving-ca"
    parent_ca = RootCA

    def cert_config(self, parents: Parents) -> CertCfg:
        return CertCfg(
            common_name="service-serving",
            organizational_unit="bootkube",
            usage=CertUsage.CA,
        )


class EtcdClientCertKey(SignedCertKey):
    """Client certificate used by the API server to talk to etcd."""

    asset_name = "Etcd Client Cert"
    file_basename = "etcd-client"
    parent_ca = EtcdCA

    def cert_config(self, parents: Parents) -> CertCfg:
        return CertCfg(
            common_name="etcd", organizational_unit="etcd", usage=CertUsage.CLIENT
        )


class _InstallConfigCertKey(SignedCertKey):
    """A signed certificate whose names depend on the install config."""

    def dependencies(self) -> list[type[Asset]]:
        return [self.parent_ca, InstallConfig]


class APIServerCertKey(_InstallConfigCertKey):
    """Serving certificate of the kubernetes API server."""

    asset_name = "API Server Cert"
    file_basename = "apiserver"
    parent_ca = KubeCA

    def cert_config(self, parents: Parents) -> CertCfg:
        config = parents.get(InstallConfig).config
        return CertCfg(
            common_name="system:kube-apiserver",
            organization="kube-master",
            usage=CertUsage.SERVER_CLIENT,
            dns_names=(
                config.api_host,
                "kubernetes",
                "kubernetes.default",
                "kubernetes.default.svc",
                "kubernetes.default.svc.cluster.local",
                "localhost",
            ),
            ip_addresses=(config.service_ip, "127.0.0.1"),
        )


class OpenshiftAPIServerCertKey(_InstallConfigCertKey):
    """Serving certificate of the openshift API server."""

    asset_name = "Openshift API Server Cert"
    file_basename = "openshift-apiserver"
    parent_ca = AggregatorCA

    def cert_config(self, parents: Parents) -> CertCfg:
        config = parents.get(InstallConfig).config
        return CertCfg(
            common_name="system:openshift-apiserver",
            organization="kube-master",
            usage=CertUsage.SERVER_CLIENT,
            dns_names=(
                config.api_host,
                "openshift-apiserver",
                "openshift-apiserver.kube-system",
                "openshift-apiserver.kube-system.svc",
                "openshift-apiserver.kube-system.svc.cluster.local",
                "localhost",
            ),
            ip_addresses=(config.service_ip, "127.0.0.1"),
        )


class APIServerProxyCertKey(SignedCertKey):
    """Client certificate used by the API server to reach aggregated APIs."""

    asset_name = "API Server Proxy Cert"
    file_basename = "apiserver-proxy"
    parent_ca = AggregatorCA

    def cert_config(self, parents: Parents) -> CertCfg:
        return CertCfg(
            common_name="kube-apiserver-proxy",
            organization="kube-master",
            usage=CertUsage.CLIENT,
        )


class ClusterAPIServerCertKey(SignedCertKey):
    """Intermediate CA for the cluster API server."""

    asset_name = "Cluster API Server CA"
    file_basename = "cluster-apiserver-ca"
    parent_ca = AggregatorCA

    def cert_config(self, parents: Parents) -> CertCfg:
        return CertCfg(
            common_name="cluster-apiserver",
            organizational_unit="bootkube",
            usage=CertUsage.SERVER_CLIENT,
            is_ca=True,
        )


class IngressCertKey(_InstallConfigCertKey):
    """Wildcard serving certificate for the default ingress."""

    asset_name = "Ingress Cert"
    file_basename = "ingress"
    parent_ca = KubeCA

    def cert_config(self, parents: Parents) -> CertCfg:
        config = parents.get(InstallConfig).config
        base_address = f"{config.cluster_name}.{config.base_domain}"
        return CertCfg(
            common_name=base_address,
            organization="ingress",
            usage=CertUsage.SERVER,
            dns_names=(base_address, f"*.{base_address}"),
        )


class MCSCertKey(_InstallConfigCertKey):
    """Serving certificate of the machine config server."""

    asset_name = "Machine Config Server Cert"
    file_basename = "machine-config-server"
    parent_ca = RootCA

    def cert_config(self, parents: Parents) -> CertCfg:
        config = parents.get(InstallConfig).config
        return CertCfg(
            common_name="system:machine-config-server",
            usage=CertUsage.SERVER,
            dns_names=(config.api_host,),
        )


class KubeletCertKey(SignedCertKey):
    """Short lived client certificate used by kubelets to bootstrap."""

    asset_name = "Kubelet Cert"
    file_basename = "kubelet"
    parent_ca = KubeCA

    def cert_config(self, parents: Parents) -> CertCfg:
        return CertCfg(
            common_name="system:serviceaccount:kube-system:default",
            organization="system:serviceaccounts:kube-system",
            usage=CertUsage.CLIENT,
            validity=VALIDITY_THIRTY_MINUTES,
        )


class AdminCertKey(SignedCertKey):
    """Client certificate of the cluster administrator."""

    asset_name = "Admin Cert"
    file_basename = "admin"
    parent_ca = KubeCA

    def cert_config(self, parents: Parents) -> CertCfg:
        return CertCfg(
            common_name="system:admin",
            organization="system:masters",
            usage=CertUsage.CLIENT,
        )


class ServiceAccountKeyPair(WritableAsset):
    """The key pair used to sign and verify service account tokens."""

    def __init__(self, public: bytes | None = None, private: bytes | None = None) -> None:
        """Initialize the asset, optionally with existing PEM material."""
        self._public = public
        self._private = private

    def name(self) -> str:
        return "Service Account Key Pair"

    def dependencies(self) -> list[type[Asset]]:
        return []

    def generate(self, parents: Parents) -> None:
        key = generate_private_key()
        self._public = public_key_to_pem(key)
        self._private = private_key_to_pem(key)

    def public(self) -> bytes:
        """The PEM encoded public key."""
        return self._require(self._public)

    def private(self) -> bytes:
        """The PEM encoded private key."""
        return self._require(self._private)

    def files(self) -> list[GeneratedFile]:
        return [
            GeneratedFile(f"{TLS_DIR}/service-account.key", self.private()),
            GeneratedFile(f"{TLS_DIR}/service-account.pub", self.public()),
        ]
