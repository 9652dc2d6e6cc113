"""Bodies of the manifests written for the bootstrap control plane."""
