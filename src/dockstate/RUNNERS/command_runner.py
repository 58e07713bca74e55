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
Execution of runtime CLI commands with captured output.
"""
import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from ..exceptions import CommandError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Captured outcome of one CLI invocation."""

    args: List[str]
    returncode: int
    stdout: str
    stderr: str


class CommandRunner:
    """
    Runs the container runtime CLI and waits for it to finish.
    Every call spawns one process; nothing is retried.
    """
    def __init__(self, tool: str = "docker"):
        """
        Initializes the command runner.

        Args:
            tool (str): Executable name or path of the runtime CLI.
        """
        self.tool = tool

    def run(self, args: List[str], input_text: Optional[str] = None) -> CommandResult:
        """
        Runs `<tool> <args...>` to completion.

        Args:
            args (List[str]): Arguments after the tool name.
            input_text (Optional[str]): Written to the child's stdin, which is then
                closed before waiting. Never logged.

        Returns:
            CommandResult: Exit status and decoded output.

        Raises:
            CommandError: If the tool cannot be started, its streams fail,
                or it exits non-zero.
        """
        command = [self.tool] + list(args)
        logger.debug("Running command: %s", " ".join(command))

        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.PIPE if input_text is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                # Avoid shell=True for security reasons (CWE-78)
                shell=False
            )
        except FileNotFoundError as e:
            raise CommandError(
                f"{self.tool} executable not found", args=command
            ) from e
        except OSError as e:
            raise CommandError(
                f"failed to start {self.tool}: {e}", args=command
            ) from e

        try:
            # communicate() closes stdin after writing, so the child sees EOF
            stdout, stderr = process.communicate(input=input_text)
        except OSError as e:
            process.kill()
            process.wait()
            raise CommandError(
                f"I/O error while running {' '.join(command[:2])}: {e}", args=command
            ) from e

        result = CommandResult(
            args=command,
            returncode=process.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )

        if result.returncode != 0:
            raise CommandError(
                f"{' '.join(command[:2])} exited with status {result.returncode}",
                args=command,
                returncode=result.returncode,
                stderr=result.stderr,
            )

        return result
