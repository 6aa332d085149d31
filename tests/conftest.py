"""Shared test fixtures for ocpinit tests."""
import pytest

from ocpinit.core.config import set_settings
from ocpinit.core.logger import close_file_logging
from ocpinit.project import ProjectConfig
from ocpinit.scaffold.filesystem import MemoryFilesystem

AUTH_PROXY_PATCH_YAML = """# This patch inject a sidecar container which is a HTTP proxy for the
# controller manager, it performs RBAC authorization against the Kubernetes API using SubjectAccessReviews.
apiVersion: apps/v1
kind: Deployment
metadata:
  name: controller-manager
  namespace: system
spec:
  template:
    spec:
      containers:
      - name: kube-rbac-proxy
        image: gcr.io/kubebuilder/kube-rbac-proxy:v0.13.1
        args:
        - "--secure-listen-address=0.0.0.0:8443"
"""

GO_DOCKERFILE = """# Build the manager binary
FROM golang:1.19 as builder
ARG TARGETOS
ARG TARGETARCH

WORKDIR /workspace
COPY go.mod go.mod
COPY go.sum go.sum
RUN go mod download

COPY main.go main.go
RUN CGO_ENABLED=0 GOOS=${TARGETOS:-linux} GOARCH=${TARGETARCH} go build -a -o manager main.go

FROM gcr.io/distroless/static:nonroot
WORKDIR /
COPY --from=builder /workspace/manager .
USER 65532:65532

ENTRYPOINT ["/manager"]
"""

GO_MOD = """module github.com/example/memcached-operator

go 1.19

require (
	github.com/onsi/ginkgo/v2 v2.6.0
	k8s.io/apimachinery v0.26.0
	sigs.k8s.io/controller-runtime v0.14.1
)

require (
	golang.org/x/net v0.3.1-0.20221206200815-1e63c2f08a10 // indirect
	golang.org/x/oauth2 v0.0.0-20220223155221-ee480838109b // indirect
)
"""

PROJECT_V3 = """domain: example.com
layout:
- go.kubebuilder.io/v3
projectName: memcached-operator
repo: github.com/example/memcached-operator
version: "3"
"""

PROJECT_V2 = """domain: example.com
repo: github.com/example/memcached-operator
version: "2"
"""


@pytest.fixture(autouse=True)
def reset_settings():
    """Each test starts from the default version pins."""
    set_settings(None)
    yield
    set_settings(None)


@pytest.fixture(autouse=True)
def detach_log_files():
    """Close file handlers a test attached to the ocpinit logger."""
    yield
    close_file_logging()


@pytest.fixture
def go_project_files():
    """Files written by the upstream Go scaffold."""
    return {
        "config/default/manager_auth_proxy_patch.yaml": AUTH_PROXY_PATCH_YAML,
        "Dockerfile": GO_DOCKERFILE,
        "go.mod": GO_MOD,
        "main.go": "package main\n\nfunc main() {}\n",
        "PROJECT": PROJECT_V3,
    }


@pytest.fixture
def memfs(go_project_files):
    """In-memory filesystem holding a freshly scaffolded Go project."""
    return MemoryFilesystem(go_project_files)


@pytest.fixture
def project_config():
    return ProjectConfig.from_yaml(PROJECT_V3)


@pytest.fixture
def go_project_dir(tmp_path, go_project_files):
    """Real directory holding a freshly scaffolded Go project."""
    for rel_path, content in go_project_files.items():
        target = tmp_path / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return tmp_path


@pytest.fixture
def project_v2_config():
    """Legacy project config without a plugins section."""
    return ProjectConfig.from_yaml(PROJECT_V2)
