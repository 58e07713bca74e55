"""
Single entry point bundling the registries, resolver and reconciler.
"""
from typing import List, Optional

from ..MODELS.runtime_records import ContainerRecord, ConvergenceResult, ImageRecord, InspectionRecord
from ..MODELS.settings import RuntimeSettings
from ..REGISTRY.container_registry import ContainerRegistry
from ..REGISTRY.image_registry import ImageRegistry
from ..RUNNERS.command_runner import CommandRunner
from .digest_resolver import DigestResolver
from .lifecycle_reconciler import LifecycleReconciler


class RuntimeManager:
    """
    Manages images and containers of the local runtime.
    Each call queries the runtime afresh.
    """
    def __init__(self, runner: CommandRunner, registry_host: Optional[str] = None):
        """
        :param runner: Runs the runtime CLI.
        :param registry_host: Registry to log in to for private pulls.
        """
        self.runner = runner
        self.images = ImageRegistry(runner)
        self.containers = ContainerRegistry(runner)
        self.resolver = DigestResolver(self.images, self.containers)
        self.reconciler = LifecycleReconciler(
            runner, self.images, self.resolver, registry_host=registry_host
        )

    @classmethod
    def from_settings(cls, settings: RuntimeSettings) -> "RuntimeManager":
        return cls(CommandRunner(settings.tool), registry_host=settings.registry_host)

    # Images
    def list_images(self) -> List[ImageRecord]:
        return self.images.list_images()

    def get_image_details(self, local_id: str) -> ImageRecord:
        return self.images.get_image_details(local_id)

    def remove_image_by_local_id(self, local_id: str) -> None:
        self.images.remove_image_by_local_id(local_id)

    def remove_image_by_content_digest(self, digest: str) -> None:
        self.images.remove_image_by_content_digest(digest)

    # Containers
    def list_containers(self) -> List[ContainerRecord]:
        return self.containers.list_containers()

    def inspect_container(self, container_id: str) -> InspectionRecord:
        return self.containers.inspect_container(container_id)

    # Digests
    def get_container_image_local_id(self, container_id: str) -> str:
        return self.resolver.get_container_image_local_id(container_id)

    def get_container_image_digest(self, container_id: str) -> str:
        return self.resolver.get_container_image_digest(container_id)

    def get_containers_running_image(self, digest: str) -> List[ContainerRecord]:
        return self.resolver.get_containers_running_image(digest)

    # Lifecycle
    def pull_image(self, reference: str, digest: str) -> None:
        self.reconciler.pull_image(reference, digest)

    def pull_private_image(
        self, reference: str, principal: str, secret: str, registry: Optional[str] = None
    ) -> None:
        self.reconciler.pull_private_image(reference, principal, secret, registry=registry)

    def converge(
        self,
        reference: str,
        target_digest: str,
        previous_digest: Optional[str] = None,
        remove_previous: bool = True,
    ) -> ConvergenceResult:
        return self.reconciler.converge(
            reference, target_digest, previous_digest, remove_previous=remove_previous
        )
