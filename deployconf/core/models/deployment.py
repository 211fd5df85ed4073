"""
Deployment models — the resolved configuration record and its manifest.

``DeploymentConfig`` is built once at program start by the resolver and
handed by reference to every provisioning unit.  It is frozen: nothing
downstream can change the names a unit derives from it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_ENVIRONMENT = "dev"
DEFAULT_REGISTRY_REPO_NAME = "nginx/nginx"
DEFAULT_REGISTRY_IMAGE_TAG = "latest"
DEFAULT_MONITORED_DOMAIN = "localhost"
DEFAULT_DESIRED_INSTANCE_COUNT = 1


class Manifest(BaseModel):
    """The project descriptor (package.json / pyproject.toml).

    Only ``name`` and ``version`` matter to resolution; they are the
    fallbacks for ``project`` and ``version``.
    """

    name: str = ""
    version: str = ""
    description: str = ""


class DeploymentConfig(BaseModel):
    """Resolved, immutable deployment configuration."""

    model_config = ConfigDict(frozen=True)

    project: str
    environment: str = DEFAULT_ENVIRONMENT
    version: str
    registry_repo_name: str = DEFAULT_REGISTRY_REPO_NAME
    registry_image_tag: str = DEFAULT_REGISTRY_IMAGE_TAG
    monitored_domain: str = DEFAULT_MONITORED_DOMAIN
    desired_instance_count: int = Field(default=DEFAULT_DESIRED_INSTANCE_COUNT, ge=0)

    @property
    def project_slug(self) -> str:
        """Project name as used in resource names and tags."""
        return self.project.lower()

    @property
    def environment_slug(self) -> str:
        """Environment name as used in resource names and tags."""
        return self.environment.lower()

    def to_dict(self) -> dict:
        """Record plus its lowercase forms, JSON-serializable."""
        data = self.model_dump()
        data["project_slug"] = self.project_slug
        data["environment_slug"] = self.environment_slug
        return data
