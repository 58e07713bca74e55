"""
Shared fixtures: a fake runtime CLI and helpers to render its tables.
"""
import json
from typing import Dict, List, Optional, Tuple

import pytest

from dockstate.exceptions import CommandError
from dockstate.RUNNERS.command_runner import CommandResult

DIGEST_A = "sha256:2b7412e6465c3c7fc5bb21d3e6f1917c167358449fecac8176c6e496e5c1f05f"
IMAGE_A = "sha256:e4c58958181a5925816faa528ce959e487632f4cfd192f8132f71b32df2744b4"
DIGEST_B = "sha256:218bb51abbd1864df8be26166f847547b3851a89999ca7bfceb85ca9b5d2e95d"
IMAGE_B = "sha256:bf40b7bc7a11b43785755d3c5f23dee03b08e988b327a2f10b22d01d5dc5259d"
DIGEST_C = "sha256:c9cf959fd83770dfdefd8fb42cfef0761432af36a764c077aed54bbc5bb25368"
IMAGE_C = "sha256:5a81c4b8502e4979e75bd8f91343b95b0d695ab16f8e4a1d4a8b5e4f3b2c1d0e"

IMAGE_HEADERS = ["REPOSITORY", "TAG", "DIGEST", "IMAGE ID", "CREATED", "SIZE"]
CONTAINER_HEADERS = ["CONTAINER ID", "IMAGE", "COMMAND", "CREATED", "STATUS", "PORTS", "NAMES"]

IMAGES_CMD = ["images", "--digests", "--no-trunc"]
CONTAINERS_CMD = ["container", "ls", "--all", "--no-trunc"]


def format_table(headers: List[str], rows: List[List[str]]) -> str:
    """Renders rows the way the runtime CLI aligns its columns."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def render(cells):
        padded = [cell.ljust(widths[i] + 3) for i, cell in enumerate(cells[:-1])]
        return ("".join(padded) + cells[-1]).rstrip()

    return "\n".join([render(headers)] + [render(row) for row in rows]) + "\n"


def inspect_json(container_id: str, image_id) -> str:
    return json.dumps([{"Id": container_id, "Image": image_id, "State": {"Running": True}}])


class FakeRunner:
    """
    Stands in for CommandRunner. Responses are queued per argument list;
    the last queued response for a command is reused once the queue runs dry.
    """

    def __init__(self):
        self.responses: Dict[Tuple[str, ...], List[CommandResult]] = {}
        self.calls: List[Tuple[List[str], Optional[str]]] = []

    def add(self, args: List[str], stdout: str = "", returncode: int = 0, stderr: str = ""):
        result = CommandResult(args=["docker"] + list(args), returncode=returncode,
                               stdout=stdout, stderr=stderr)
        self.responses.setdefault(tuple(args), []).append(result)
        return self

    def run(self, args: List[str], input_text: Optional[str] = None) -> CommandResult:
        self.calls.append((list(args), input_text))
        queue = self.responses.get(tuple(args))
        if not queue:
            raise AssertionError(f"unexpected command: {args}")
        result = queue.pop(0) if len(queue) > 1 else queue[0]
        if result.returncode != 0:
            raise CommandError(
                f"docker {args[0]} exited with status {result.returncode}",
                args=result.args,
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result

    def commands(self) -> List[List[str]]:
        return [args for args, _ in self.calls]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def host(fake_runner):
    """
    A host with two images and three containers: containers 1 and 3 run
    image A, container 2 runs image B.
    """
    fake_runner.add(IMAGES_CMD, format_table(IMAGE_HEADERS, [
        ["ubuntu", "latest", DIGEST_A, IMAGE_A, "4 weeks ago", "77.8MB"],
        ["ubuntu", "<none>", DIGEST_B, IMAGE_B, "4 weeks ago", "72.8MB"],
    ]))
    fake_runner.add(CONTAINERS_CMD, format_table(CONTAINER_HEADERS, [
        ["c1" * 32, "ubuntu:latest", '"bash"', "5 seconds ago", "Up 3 seconds", "", "eager_pike"],
        ["c2" * 32, f"ubuntu@{DIGEST_B}", '"sleep 10"', "11 minutes ago", "Up 11 minutes", "", "pensive_ishizaka"],
        ["c3" * 32, "ubuntu", '"bash -c \'echo hi\'"', "2 hours ago", "Exited (0) 2 hours ago", "", "quirky_hopper"],
    ]))
    fake_runner.add(["container", "inspect", "c1" * 32], inspect_json("c1" * 32, IMAGE_A))
    fake_runner.add(["container", "inspect", "c2" * 32], inspect_json("c2" * 32, IMAGE_B))
    fake_runner.add(["container", "inspect", "c3" * 32], inspect_json("c3" * 32, IMAGE_A))
    return fake_runner
