"""
Resolution of which image content digest each container is running.

Container listings only show the image reference as written (often a tag), so
the digest is found in two hops: container -> local image id (inspection)
-> image record (image listing) -> content digest.
"""
import logging
from typing import List

from ..exceptions import DockstateError
from ..MODELS.runtime_records import NO_DIGEST, ContainerRecord
from ..PARSERS.inspect_parser import get_string_field
from ..REGISTRY.container_registry import ContainerRegistry
from ..REGISTRY.image_registry import ImageRegistry

logger = logging.getLogger(__name__)

IMAGE_ID_FIELD = "Image"


class DigestResolver:
    """
    Maps containers to the content digest of their image.
    """
    def __init__(self, images: ImageRegistry, containers: ContainerRegistry):
        """
        :param images: Image listing used for local id -> digest.
        :param containers: Container listing and inspection.
        """
        self.images = images
        self.containers = containers

    def get_container_image_local_id(self, container_id: str) -> str:
        """
        Returns the local image id a container was created from.

        :raises InspectionFieldError: If the inspection lacks a string image id.
        """
        record = self.containers.inspect_container(container_id)
        return get_string_field(record, IMAGE_ID_FIELD)

    def get_container_image_digest(self, container_id: str) -> str:
        """
        Returns the content digest of the image a container runs.

        :raises ImageNotFoundError: If the container's image is no longer listed.
        """
        local_id = self.get_container_image_local_id(container_id)
        return self.images.get_image_details(local_id).content_digest

    def get_containers_running_image(self, digest: str) -> List[ContainerRecord]:
        """
        Returns the containers whose image has this content digest, in listing order.

        Containers whose digest cannot be resolved (e.g. their image was removed)
        are left out rather than failing the whole query. `<none>` is not a
        digest, so it matches no container.
        """
        if not digest or digest == NO_DIGEST:
            return []

        matches = []
        for container in self.containers.list_containers():
            try:
                container_digest = self.get_container_image_digest(container.id)
            except DockstateError as e:
                logger.debug("Skipping container %s: %s", container.id, e)
                continue
            if container_digest == digest:
                matches.append(container)
        return matches
