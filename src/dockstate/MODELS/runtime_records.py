"""
Models for the records read back from the container runtime CLI.

Every field is kept as the runtime printed it. Sizes and creation times are
free text ("77.8MB", "4 weeks ago") because the CLI does not format them
stably enough to normalize.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

NO_DIGEST = "<none>"

# One container's `inspect` output, first element of the JSON array.
InspectionRecord = Dict[str, Any]


class ImageRecord(BaseModel):
    """
    One row of `images --digests --no-trunc`.
    """
    repository: str
    tag: str
    content_digest: str
    local_id: str
    created: str
    size: str

    @property
    def is_dangling(self) -> bool:
        return self.content_digest == NO_DIGEST


class ContainerRecord(BaseModel):
    """
    One row of `container ls --all --no-trunc`.

    `image` is the reference as printed (repository:tag or repository@digest),
    not normalized.
    """
    id: str
    image: str
    command: str
    created: str
    status: str
    ports: str
    names: str

    @property
    def is_running(self) -> bool:
        return self.status.startswith("Up")


class ConvergenceResult(BaseModel):
    """
    Outcome of moving a host from one image digest to another.
    """
    reference: str
    target_digest: str
    previous_digest: Optional[str] = None
    containers: List[ContainerRecord] = []
    removed_previous: bool = False
