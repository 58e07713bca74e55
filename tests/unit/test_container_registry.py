"""
Unit tests for the container registry.
"""
import pytest

from conftest import CONTAINERS_CMD, DIGEST_B, IMAGE_A
from dockstate.exceptions import CommandError, OutputParseError
from dockstate.REGISTRY.container_registry import ContainerRegistry


class TestContainerRegistry:
    """Tests for ContainerRegistry."""

    def test_list_containers(self, host):
        containers = ContainerRegistry(host).list_containers()
        assert [c.id for c in containers] == ["c1" * 32, "c2" * 32, "c3" * 32]
        assert containers[0].image == "ubuntu:latest"
        assert containers[0].names == "eager_pike"
        assert containers[0].is_running
        assert host.commands() == [CONTAINERS_CMD]

    def test_image_reference_not_normalized(self, host):
        containers = ContainerRegistry(host).list_containers()
        assert containers[1].image == f"ubuntu@{DIGEST_B}"
        assert containers[2].image == "ubuntu"

    def test_stopped_container_listed(self, host):
        stopped = ContainerRegistry(host).list_containers()[2]
        assert stopped.status == "Exited (0) 2 hours ago"
        assert stopped.command == '"bash -c \'echo hi\'"'
        assert not stopped.is_running

    def test_no_containers(self, fake_runner):
        fake_runner.add(CONTAINERS_CMD,
                        "CONTAINER ID   IMAGE     COMMAND   CREATED   STATUS    PORTS     NAMES\n")
        assert ContainerRegistry(fake_runner).list_containers() == []

    def test_unknown_format(self, fake_runner):
        fake_runner.add(CONTAINERS_CMD, "ID   IMAGE   NAMES\nabc  ubuntu  web\n")
        with pytest.raises(OutputParseError):
            ContainerRegistry(fake_runner).list_containers()

    def test_inspect_container(self, host):
        record = ContainerRegistry(host).inspect_container("c1" * 32)
        assert record["Image"] == IMAGE_A
        assert record["State"]["Running"] is True

    def test_inspect_bad_output_names_container(self, fake_runner):
        fake_runner.add(["container", "inspect", "abc"], "[]")
        with pytest.raises(OutputParseError) as excinfo:
            ContainerRegistry(fake_runner).inspect_container("abc")
        assert excinfo.value.details["container_id"] == "abc"
        assert "abc" in str(excinfo.value)

    def test_inspect_unknown_container(self, fake_runner):
        fake_runner.add(["container", "inspect", "nope"], "[]", returncode=1,
                        stderr="Error: No such container: nope")
        with pytest.raises(CommandError):
            ContainerRegistry(fake_runner).inspect_container("nope")
