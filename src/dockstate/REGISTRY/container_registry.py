"""
View of the containers known to the local container runtime, stopped ones included.
"""
from typing import List

from ..exceptions import OutputParseError
from ..MODELS.runtime_records import ContainerRecord, InspectionRecord
from ..PARSERS.inspect_parser import parse_inspection
from ..PARSERS.table_parser import FixedOffsetParser
from ..RUNNERS.command_runner import CommandRunner

CONTAINER_ID_HEADER = "CONTAINER ID"
CONTAINER_HEADERS = ["IMAGE", "COMMAND", "CREATED", "STATUS", "PORTS", "NAMES"]


class ContainerRegistry:
    """
    Lists and inspects containers through the runtime CLI.
    """

    def __init__(self, runner: CommandRunner):
        self.runner = runner
        self.parser = FixedOffsetParser(leading_column=CONTAINER_ID_HEADER)

    def list_containers(self) -> List[ContainerRecord]:
        """
        Lists every container with untruncated ids.

        :raises OutputParseError: If any expected column header is missing.
        """
        result = self.runner.run(["container", "ls", "--all", "--no-trunc"])
        rows = self.parser.parse(result.stdout, CONTAINER_HEADERS)
        return [
            ContainerRecord(
                id=row[CONTAINER_ID_HEADER],
                image=row["IMAGE"],
                command=row["COMMAND"],
                created=row["CREATED"],
                status=row["STATUS"],
                ports=row["PORTS"],
                names=row["NAMES"],
            )
            for row in rows
        ]

    def inspect_container(self, container_id: str) -> InspectionRecord:
        """
        Returns the detailed inspection of one container.

        :param container_id: Container id or name.
        :raises OutputParseError: If the inspect output is not a non-empty JSON array.
        """
        result = self.runner.run(["container", "inspect", container_id])
        try:
            return parse_inspection(result.stdout)
        except OutputParseError as e:
            details = dict(e.details)
            details["container_id"] = container_id
            raise OutputParseError(e.message, details) from e
