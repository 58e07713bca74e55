# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
View of the images known to the local container runtime.
Every call re-lists the images; nothing is cached between calls.
"""
import logging
from typing import List

from ..exceptions import ImageNotFoundError, InvalidReferenceError
from ..MODELS.runtime_records import NO_DIGEST, ImageRecord
from ..PARSERS.table_parser import DelimiterCollapseParser
from ..RUNNERS.command_runner import CommandRunner

logger = logging.getLogger(__name__)

IMAGE_HEADERS = ["REPOSITORY", "TAG", "DIGEST", "IMAGE ID", "CREATED", "SIZE"]


class ImageRegistry:
    """
    Lists, looks up and removes images through the runtime CLI.
    """

    def __init__(self, runner: CommandRunner):
        """
        Initialize the image registry.

        Args:
            runner: Runs the runtime CLI.
        """
        self.runner = runner
        self.parser = DelimiterCollapseParser()

    def list_images(self) -> List[ImageRecord]:
        """
        List all local images with digests and untruncated ids.

        Rows the parser cannot split into six columns are left out.
        """
        result = self.runner.run(["images", "--digests", "--no-trunc"])
        rows = self.parser.parse(result.stdout, IMAGE_HEADERS)
        return [
            ImageRecord(
                repository=row["REPOSITORY"],
                tag=row["TAG"],
                content_digest=row["DIGEST"],
                local_id=row["IMAGE ID"],
                created=row["CREATED"],
                size=row["SIZE"],
            )
            for row in rows
        ]

    def get_image_details(self, local_id: str) -> ImageRecord:
        """
        Get the image whose local id matches exactly.

        Raises:
            ImageNotFoundError: If no listed image has this id.
        """
        for image in self.list_images():
            if image.local_id == local_id:
                return image
        raise ImageNotFoundError("image not found", {"local_id": local_id})

    def find_by_content_digest(self, digest: str) -> ImageRecord:
        """
        Get the first image listed with this content digest.

        Images listed without a digest never match, so the `<none>`
        placeholder cannot select an arbitrary dangling image.

        Raises:
            ImageNotFoundError: If no listed image has this digest.
        """
        if not digest or digest == NO_DIGEST:
            raise ImageNotFoundError("image has no content digest", {"digest": digest})

        for image in self.list_images():
            if image.is_dangling:
                continue
            if image.content_digest == digest:
                return image
        raise ImageNotFoundError("image not found", {"digest": digest})

    def remove_image_by_local_id(self, local_id: str) -> None:
        """
        Remove an image by local id. Runtime errors (e.g. image in use)
        propagate as CommandError.

        Raises:
            InvalidReferenceError: If the id is empty.
        """
        if not local_id:
            raise InvalidReferenceError("local_id must not be empty")

        logger.info("Removing image %s", local_id)
        self.runner.run(["rmi", local_id])

    def remove_image_by_content_digest(self, digest: str) -> None:
        """
        Remove the image carrying this content digest.

        Raises:
            ImageNotFoundError: If no listed image has this digest; nothing is removed.
        """
        image = self.find_by_content_digest(digest)
        logger.debug("Digest %s resolved to image %s", digest, image.local_id)
        self.remove_image_by_local_id(image.local_id)
