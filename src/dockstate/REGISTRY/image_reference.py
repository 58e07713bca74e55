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
Image reference handling for pull targets.
Splits references like 'ubuntu:latest' or 'ghcr.io/org/app@sha256:...' without
rewriting the name the caller wrote.
"""

from typing import Optional
from dataclasses import dataclass

from ..exceptions import InvalidReferenceError


@dataclass
class ImageReference:
    """
    Parsed image reference.

    Examples:
        - ubuntu -> name='ubuntu', registry='docker.io'
        - ubuntu:22.04 -> name='ubuntu', tag='22.04'
        - ghcr.io/org/app:v1 -> name='ghcr.io/org/app', registry='ghcr.io'
        - localhost:5000/app@sha256:abc -> name='localhost:5000/app', digest='sha256:abc'
    """

    name: str
    registry: str
    tag: Optional[str] = None
    digest: Optional[str] = None

    DEFAULT_REGISTRY = "docker.io"

    @classmethod
    def parse(cls, reference: str) -> "ImageReference":
        """
        Parse an image reference string.

        Args:
            reference: Image reference string (e.g., 'ubuntu:latest', 'ghcr.io/org/app')

        Returns:
            Parsed ImageReference object.

        Raises:
            InvalidReferenceError: If the reference, its digest or its repository is empty.
        """
        reference = reference.strip() if reference else ""
        if not reference:
            raise InvalidReferenceError("Empty image reference")

        # Handle digest format (image@sha256:...)
        digest = None
        if "@" in reference:
            reference, digest = reference.rsplit("@", 1)
            if not digest:
                raise InvalidReferenceError("Empty digest in image reference")

        # A colon after the last slash is a tag, before it a registry port
        tag = None
        last_colon = reference.rfind(":")
        if last_colon > reference.rfind("/"):
            tag = reference[last_colon + 1:]
            reference = reference[:last_colon]

        if not reference:
            raise InvalidReferenceError("Image reference has no repository")

        registry = cls.DEFAULT_REGISTRY
        first_part, _, rest = reference.partition("/")
        if rest and ("." in first_part or ":" in first_part or first_part == "localhost"):
            registry = first_part

        return cls(name=reference, registry=registry, tag=tag, digest=digest)

    def pinned(self, digest: str) -> str:
        """
        Reference to pull a specific content digest of this repository.

        Any tag or digest already in the parsed reference is dropped:
        'ubuntu:22.04' pinned to 'sha256:abc' gives 'ubuntu@sha256:abc'.
        """
        if not digest:
            raise InvalidReferenceError("Empty digest")
        return f"{self.name}@{digest}"

    def __str__(self) -> str:
        if self.digest:
            return f"{self.name}@{self.digest}"
        if self.tag:
            return f"{self.name}:{self.tag}"
        return self.name
