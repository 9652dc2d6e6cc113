"""Manifests applied by bootkube while the control plane starts.

Templates substitute fields of the bootkube template data record; values for
secret data are already base64 encoded. Static content is written unchanged.
"""

from installer_assets.template import Template

# Templates

CLUSTER_APISERVER_CERTS = Template(
    name="cluster-apiserver-certs",
    body="""\
apiVersion: v1
kind: Secret
metadata:
  name: cluster-apiserver-certs
  namespace: kube-system
  labels:
    api: clusterapi
    apiserver: "true"
type: Opaque
data:
  tls.crt: {{ clusterapi_ca_cert }}
  tls.key: {{ clusterapi_ca_key }}
""",
)

IGN_CONFIG = Template(
    name="ign-config",
    body="""\
apiVersion: v1
kind: Secret
metadata:
  name: ignition-worker
  namespace: openshift-cluster-api
type: Opaque
data:
  userData: {{ worker_ign_config }}
""",
)

KUBE_APISERVER_SECRET = Template(
    name="kube-apiserver-secret",
    body="""\
apiVersion: v1
kind: Secret
metadata:
  name: kube-apiserver
  namespace: kube-system
type: Opaque
data:
  aggregator-ca.crt: {{ aggregator_ca_cert }}
  aggregator-ca.key: {{ aggregator_ca_key }}
  apiserver.key: {{ apiserver_key }}
  apiserver.crt: {{ apiserver_cert }}
  apiserver-proxy.key: {{ apiserver_proxy_key }}
  apiserver-proxy.crt: {{ apiserver_proxy_cert }}
  service-account.pub: {{ serviceaccount_pub }}
  root-ca.crt: {{ root_ca_cert }}
  kube-ca.crt: {{ kube_ca_cert }}
  etcd-client-ca.crt: {{ etcd_ca_cert }}
  etcd-client.crt: {{ etcd_client_cert }}
  etcd-client.key: {{ etcd_client_key }}
  oidc-ca.crt: {{ oidc_ca_cert }}
  service-serving-ca.crt: {{ service_serving_ca_cert }}
  service-serving-ca.key: {{ service_serving_ca_key }}
""",
)

KUBE_CLOUD_CONFIG = Template(
    name="kube-cloud-config",
    body="""\
apiVersion: v1
kind: Secret
metadata:
  name: kube-cloud-cfg
  namespace: kube-system
type: Opaque
data:
  config: "{{ base64_encode_cloud_provider_config }}"
""",
)

KUBE_CONTROLLER_MANAGER_SECRET = Template(
    name="kube-controller-manager-secret",
    body="""\
apiVersion: v1
kind: Secret
metadata:
  name: kube-controller-manager
  namespace: kube-system
type: Opaque
data:
  service-account.key: {{ serviceaccount_key }}
  root-ca.crt: {{ root_ca_cert }}
  kube-ca.crt: {{ kube_ca_cert }}
  kube-ca.key: {{ kube_ca_key }}
""",
)

MACHINE_CONFIG_SERVER_TLS_SECRET = Template(
    name="machine-config-server-tls-secret",
    body="""\
apiVersion: v1
kind: Secret
metadata:
  name: machine-config-server-tls
  namespace: openshift-machine-config-operator
type: Opaque
data:
  tls.crt: {{ mcs_tls_cert }}
  tls.key: {{ mcs_tls_key }}
""",
)

OPENSHIFT_APISERVER_SECRET = Template(
    name="openshift-apiserver-secret",
    body="""\
apiVersion: v1
kind: Secret
metadata:
  name: openshift-apiserver
  namespace: kube-system
type: Opaque
data:
  aggregator-ca.crt: {{ aggregator_ca_cert }}
  aggregator-ca.key: {{ aggregator_ca_key }}
  apiserver.key: {{ openshift_apiserver_key }}
  apiserver.crt: {{ openshift_apiserver_cert }}
  openshift-loopback-kubeconfig: {{ openshift_loopback_kubeconfig }}
  service-account.pub: {{ serviceaccount_pub }}
  root-ca.crt: {{ root_ca_cert }}
  kube-ca.crt: {{ kube_ca_cert }}
  etcd-client-ca.crt: {{ etcd_ca_cert }}
  etcd-client.crt: {{ etcd_client_cert }}
  etcd-client.key: {{ etcd_client_key }}
""",
)

PULL = Template(
    name="pull",
    body="""\
{
  "apiVersion": "v1",
  "kind": "Secret",
  "type": "kubernetes.io/dockerconfigjson",
  "metadata": {
    "namespace": "kube-system",
    "name": "coreos-pull-secret"
  },
  "data": {
    ".dockerconfigjson": "{{ pull_secret }}"
  }
}
""",
)

TECTONIC_NETWORK_OPERATOR = Template(
    name="tectonic-network-operator",
    body="""\
apiVersion: apps/v1
kind: DaemonSet
metadata:
  name: tectonic-network-operator
  namespace: kube-system
  labels:
    k8s-app: tectonic-network-operator
    managed-by-channel-operator: "true"
spec:
  selector:
    matchLabels:
      k8s-app: tectonic-network-operator
  template:
    metadata:
      labels:
        k8s-app: tectonic-network-operator
        tectonic-app-version-name: tectonic-network
    spec:
      containers:
      - name: tectonic-network-operator
        image: {{ tectonic_network_operator_image }}
        resources:
          limits:
            cpu: 20m
            memory: 50Mi
          requests:
            cpu: 20m
            memory: 50Mi
        volumeMounts:
        - name: cluster-config
          mountPath: /etc/cluster-config
      hostNetwork: true
      restartPolicy: Always
      securityContext:
        runAsNonRoot: true
        runAsUser: 65534
      volumes:
      - name: cluster-config
        configMap:
          name: cluster-config-v1
          items:
          - key: network-config
            path: network-config
      tolerations:
      - key: "node-role.kubernetes.io/master"
        operator: "Exists"
        effect: "NoSchedule"
  updateStrategy:
    rollingUpdate:
      maxUnavailable: 1
    type: RollingUpdate
""",
)

CVO_OVERRIDES = Template(
    name="cvo-overrides",
    body="""\
apiVersion: clusterversion.openshift.io/v1
kind: CVOConfig
metadata:
  namespace: openshift-cluster-version
  name: cluster-version-operator
upstream: http://localhost:3000/graph
channel: fast
clusterID: {{ cvo_cluster_id }}
overrides:
- kind: Deployment
  namespace: openshift-cluster-network-operator
  name: cluster-network-operator
  unmanaged: true
""",
)

# Static content

TECTONIC_NAMESPACE = """\
apiVersion: v1
kind: Namespace
metadata:
  name: tectonic-system
  labels:
    name: tectonic-system
    openshift.io/run-level: "1"
"""

INGRESS_NAMESPACE = """\
apiVersion: v1
kind: Namespace
metadata:
  name: openshift-ingress
  labels:
    name: openshift-ingress
    openshift.io/run-level: "1"
"""

OPENSHIFT_WEB_CONSOLE_NAMESPACE = """\
apiVersion: v1
kind: Namespace
metadata:
  name: openshift-web-console
  labels:
    name: openshift-web-console
"""

OPENSHIFT_MACHINE_CONFIG_OPERATOR = """\
apiVersion: v1
kind: Namespace
metadata:
  name: openshift-machine-config-operator
  labels:
    name: openshift-machine-config-operator
    openshift.io/run-level: "1"
"""

OPENSHIFT_CLUSTER_API_NAMESPACE = """\
apiVersion: v1
kind: Namespace
metadata:
  name: openshift-cluster-api
  labels:
    name: openshift-cluster-api
"""

APP_VERSION_KIND = """\
apiVersion: apiextensions.k8s.io/v1beta1
kind: CustomResourceDefinition
metadata:
  name: appversions.tco.coreos.com
spec:
  group: tco.coreos.com
  version: v1
  scope: Namespaced
  names:
    plural: appversions
    singular: appversion
    kind: AppVersion
    listKind: AppVersionList
"""

APP_VERSION_MAO = """\
apiVersion: tco.coreos.com/v1
kind: AppVersion
metadata:
  name: machine-api
  namespace: kube-system
  labels:
    managed-by-channel-operator: "true"
spec:
  desiredVersion:
  paused: false
status:
  currentVersion:
  paused: false
upgradereq: 1
upgradecomp: 0
"""

APP_VERSION_TECTONIC_NETWORK = """\
apiVersion: tco.coreos.com/v1
kind: AppVersion
metadata:
  name: tectonic-network
  namespace: kube-system
  labels:
    managed-by-channel-operator: "true"
spec:
  desiredVersion:
  paused: false
status:
  currentVersion:
  paused: false
upgradereq: 1
upgradecomp: 0
"""

MACHINE_CONFIG_OPERATOR_01_IMAGES_CONFIGMAP = """\
apiVersion: v1
kind: ConfigMap
metadata:
  name: machine-config-operator-images
  namespace: openshift-machine-config-operator
data:
  images.json: '{"machineConfigController": "docker.io/openshift/origin-machine-config-controller:v4.0.0", "machineConfigDaemon": "docker.io/openshift/origin-machine-config-daemon:v4.0.0", "machineConfigServer": "docker.io/openshift/origin-machine-config-server:v4.0.0"}'
"""

OPERATORSTATUS_CRD = """\
apiVersion: apiextensions.k8s.io/v1beta1
kind: CustomResourceDefinition
metadata:
  name: operatorstatuses.clusterversion.openshift.io
spec:
  group: clusterversion.openshift.io
  version: v1
  scope: Namespaced
  names:
    plural: operatorstatuses
    singular: operatorstatus
    kind: OperatorStatus
    listKind: OperatorStatusList
"""
