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
Execution of external tools with failure classification.
"""
import subprocess
import sys
from typing import List, Optional

from ..errors import InternalError, UserError


class ProcessRunner:
    """
    Runs one external tool and classifies how it failed.

    A tool that cannot be launched at all is an internal error; a tool that
    runs and exits non-zero is a user error carrying its stderr.
    """
    def __init__(self, name: str):
        """
        Initializes the process runner.

        Args:
            name (str): Human readable name of the tool, used in errors.
        """
        self.name = name

    def run_checked(self,
                    command: List[str],
                    failure_message: str,
                    working_dir: Optional[str] = None) -> subprocess.CompletedProcess:
        """
        Runs the command to completion, capturing its output.

        Args:
            command (List[str]): Command and arguments to execute.
            failure_message (str): Primary message used on non-zero exit.
            working_dir (Optional[str]): Directory to run the command in.

        Returns:
            subprocess.CompletedProcess: The finished process.
        """
        try:
            result = subprocess.run(
                command,
                cwd=working_dir,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                shell=False
            )
        except OSError as e:
            raise InternalError(f"failed to launch {self.name}", str(e)) from e

        if result.returncode != 0:
            raise UserError(failure_message, result.stderr or result.stdout)
        return result

    def run_foreground(self,
                       command: List[str],
                       working_dir: Optional[str] = None,
                       failure_message: Optional[str] = None) -> Optional[int]:
        """
        Runs the command attached to the current terminal and waits for it.

        Args:
            command (List[str]): Command and arguments to execute.
            working_dir (Optional[str]): Directory to run the command in.
            failure_message (Optional[str]): Primary message if it cannot start.

        Returns:
            Optional[int]: Exit code, or None if the process was killed by a signal.
        """
        try:
            process = subprocess.Popen(command, cwd=working_dir, shell=False)
        except OSError as e:
            raise InternalError(failure_message or f"failed to launch {self.name}", str(e)) from e

        # Ctrl-C reaches the whole foreground group; the child decides when to exit
        while True:
            try:
                returncode = process.wait()
                break
            except KeyboardInterrupt:
                print(f"info: Interrupted, waiting for {self.name} to exit", file=sys.stderr)

        if returncode < 0:
            return None
        return returncode
