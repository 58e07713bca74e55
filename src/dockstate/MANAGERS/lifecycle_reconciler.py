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
Moving a host from one image version to another: pull the new digest,
confirm a container runs it, then remove the old image.
"""
import logging
from typing import Optional

from ..exceptions import AuthenticationError, CommandError, ConvergenceError, ImageNotFoundError
from ..MODELS.runtime_records import ConvergenceResult
from ..REGISTRY.image_reference import ImageReference
from ..REGISTRY.image_registry import ImageRegistry
from ..RUNNERS.command_runner import CommandRunner
from .digest_resolver import DigestResolver

logger = logging.getLogger(__name__)

LOGIN_SUCCEEDED = "Login Succeeded"


class LifecycleReconciler:
    """
    Pulls and removes images to converge on a desired content digest.

    The old image is only removed once a container is confirmed running the
    new one, so both are stored for a while.
    """

    def __init__(
        self,
        runner: CommandRunner,
        images: ImageRegistry,
        resolver: DigestResolver,
        registry_host: Optional[str] = None,
    ):
        """
        Initializes the reconciler.

        Args:
            runner: Runs the runtime CLI.
            images: Image registry used for removals.
            resolver: Finds containers running a digest.
            registry_host: Registry to log in to for private pulls. Defaults to
                the registry named in the image reference.
        """
        self.runner = runner
        self.images = images
        self.resolver = resolver
        self.registry_host = registry_host

    def pull_image(self, reference: str, digest: str) -> None:
        """
        Pulls `reference@digest`.

        Raises:
            CommandError: If the pull exits non-zero; stderr is attached.
        """
        target = ImageReference.parse(reference).pinned(digest)
        logger.info("Pulling image %s", target)
        try:
            result = self.runner.run(["pull", target])
        except CommandError as e:
            if e.stderr:
                logger.error("Output: %s", e.stderr.strip())
            logger.error("Failed to pull %s: %s", target, e.message)
            raise
        logger.debug("Output: %s", result.stdout.strip())

    def login(self, registry: str, principal: str, secret: str) -> None:
        """
        Logs in to a registry, passing the secret on stdin only.

        Raises:
            AuthenticationError: If the login command fails.
        """
        logger.debug("Authenticating with %s as %s", registry, principal)
        try:
            result = self.runner.run(
                ["login", registry, "-u", principal, "--password-stdin"],
                input_text=secret + "\n",
            )
        except CommandError as e:
            raise AuthenticationError(
                f"login to {registry} failed",
                args=e.command_args,
                returncode=e.returncode,
                stderr=e.stderr,
            ) from e

        if LOGIN_SUCCEEDED in result.stdout:
            logger.info("Authenticated with %s", registry)
        else:
            logger.warning("Authentication may have failed, output: %s", result.stdout.strip())

    def pull_private_image(
        self,
        reference: str,
        principal: str,
        secret: str,
        registry: Optional[str] = None,
    ) -> None:
        """
        Logs in, then pulls `reference`. The pull is skipped if login fails.

        Raises:
            AuthenticationError: If the login step fails.
            CommandError: If the pull fails.
        """
        ref = ImageReference.parse(reference)
        registry = registry or self.registry_host or ref.registry
        self.login(registry, principal, secret)

        logger.info("Pulling image %s", reference)
        try:
            result = self.runner.run(["pull", reference])
        except CommandError as e:
            logger.error("Failed to pull image: %s. Output: %s", e.message, e.stderr.strip())
            raise
        logger.debug("Output: %s", result.stdout.strip())

    def converge(
        self,
        reference: str,
        target_digest: str,
        previous_digest: Optional[str] = None,
        remove_previous: bool = True,
    ) -> ConvergenceResult:
        """
        Pulls the target digest, confirms it is running, and removes the previous image.

        Args:
            reference: Repository to pull from.
            target_digest: Content digest the host should run.
            previous_digest: Content digest the host ran before, if any.
            remove_previous: Whether to remove the previous image once verified.

        Raises:
            ConvergenceError: If no container with an `Up` status runs the target
                digest. Nothing is removed.
        """
        self.pull_image(reference, target_digest)

        # Exited or created containers still reference the image.
        containers = [
            c for c in self.resolver.get_containers_running_image(target_digest)
            if c.is_running
        ]
        if not containers:
            raise ConvergenceError(
                "no container is running the target image",
                {"reference": reference, "digest": target_digest},
            )
        logger.info(
            "%d container(s) running %s@%s", len(containers), reference, target_digest
        )

        result = ConvergenceResult(
            reference=reference,
            target_digest=target_digest,
            previous_digest=previous_digest,
            containers=containers,
        )

        if not remove_previous or not previous_digest or previous_digest == target_digest:
            return result

        try:
            self.images.remove_image_by_content_digest(previous_digest)
        except ImageNotFoundError:
            logger.warning("Previous image %s is already gone", previous_digest)
        else:
            logger.info("Removed previous image %s", previous_digest)
            result.removed_previous = True
        return result
