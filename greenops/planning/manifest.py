"""
Kubernetes manifest generation for a selected placement.

The manifest is built as a list of plain documents (namespace, one
Deployment per runtime component, one Service) and serialized once to a
multi-document YAML stream.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import yaml

from greenops.planning.capacity import WorkloadComponent, runtime_components

_UNSAFE_NAME_CHARS = re.compile(r"[^a-z0-9-]")

FALLBACK_NAME = "service"


def safe_name(name: str) -> str:
    """Kubernetes-friendly resource name derived from a component name."""
    return _UNSAFE_NAME_CHARS.sub("-", name.lower()) or FALLBACK_NAME


@dataclass(frozen=True)
class ManifestConfig:
    """Fixed parts of every generated manifest."""

    namespace: str = "greenops-app"
    image_registry: str = "your-docker-username"
    container_port: int = 4000
    service_port: int = 80
    service_type: str = "LoadBalancer"


class ManifestGenerator:
    """Builds and renders deployment manifests."""

    def __init__(self, config: ManifestConfig | None = None) -> None:
        self.config = config or ManifestConfig()

    def build(
        self,
        plan_id: str,
        region_id: str,
        instance_class: str,
        replicas: int,
        components: Sequence[WorkloadComponent],
    ) -> list[dict[str, Any]]:
        """
        Build the manifest documents.

        Args:
            plan_id: Identifier stamped on every resource
            region_id: Selected region
            instance_class: Instance class of the selected strategy
            replicas: Replica count for every Deployment
            components: Caller's workload; non-runtime types are skipped

        Returns:
            Namespace, Deployments in component order, then at most one Service
        """
        documents = [self._namespace(plan_id)]

        runtime = runtime_components(components)
        if not runtime:
            return documents

        for component in runtime:
            documents.append(
                self._deployment(safe_name(component.name), plan_id, region_id, instance_class, replicas)
            )

        exposed = next((c for c in runtime if c.type == "api-gateway"), runtime[0])
        documents.append(self._service(safe_name(exposed.name)))

        return documents

    def render(
        self,
        plan_id: str,
        region_id: str,
        instance_class: str,
        replicas: int,
        components: Sequence[WorkloadComponent],
    ) -> str:
        """Build the manifest and serialize it to YAML."""
        documents = self.build(plan_id, region_id, instance_class, replicas, components)
        return self.dump(documents)

    @staticmethod
    def dump(documents: Sequence[dict[str, Any]]) -> str:
        return yaml.safe_dump_all(
            documents,
            sort_keys=False,
            default_flow_style=False,
            explicit_start=False,
        )

    def _namespace(self, plan_id: str) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "Namespace",
            "metadata": {
                "name": self.config.namespace,
                "labels": {"greenops-plan": plan_id},
            },
        }

    def _deployment(
        self,
        name: str,
        plan_id: str,
        region_id: str,
        instance_class: str,
        replicas: int,
    ) -> dict[str, Any]:
        labels = {"app": name, "greenops-plan": plan_id}
        return {
            "apiVersion": "apps/v1",
            "kind": "Deployment",
            "metadata": {
                "name": name,
                "namespace": self.config.namespace,
                "labels": dict(labels),
            },
            "spec": {
                "replicas": replicas,
                "selector": {"matchLabels": {"app": name}},
                "template": {
                    "metadata": {"labels": dict(labels)},
                    "spec": {
                        "containers": [
                            {
                                "name": name,
                                "image": f"{self.config.image_registry}/{name}:latest",
                                "ports": [{"containerPort": self.config.container_port}],
                                "env": [
                                    {"name": "GREENOPS_PLAN_ID", "value": plan_id},
                                    {"name": "GREENOPS_REGION", "value": region_id},
                                    {"name": "GREENOPS_INSTANCE_CLASS", "value": instance_class},
                                ],
                            }
                        ],
                    },
                },
            },
        }

    def _service(self, name: str) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": {
                "name": f"{name}-svc",
                "namespace": self.config.namespace,
            },
            "spec": {
                "type": self.config.service_type,
                "selector": {"app": name},
                "ports": [
                    {
                        "name": "http",
                        "port": self.config.service_port,
                        "targetPort": self.config.container_port,
                    }
                ],
            },
        }
