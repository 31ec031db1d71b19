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
Hands an unpacked bundle to the low-level container runtime.
"""
import sys
from typing import List, Optional, TextIO

from ..MANAGERS.workspace_manager import Workspace
from ..MODELS.image_source import Bundle
from ..MODELS.tool_config import ToolConfig
from .process_runner import ProcessRunner


class RuntimeLauncher:
    """
    Starts the container in the foreground, or simulates doing so in test mode.
    """
    ROOT_DIR = "root"

    def __init__(self, tools: Optional[ToolConfig] = None, stdin: Optional[TextIO] = None):
        """
        Initializes the launcher.

        Args:
            tools (Optional[ToolConfig]): External tool configuration.
            stdin (Optional[TextIO]): Stream read in test mode. Defaults to sys.stdin.
        """
        self.tools = tools or ToolConfig()
        self.stdin = stdin
        self._runc = ProcessRunner("runc")

    def build_command(self, workspace: Workspace, identity: str, rootless: bool) -> List[str]:
        """
        Builds the runtime invocation.

        Args:
            workspace (Workspace): Workspace holding the runtime state directory.
            identity (str): Container name.
            rootless (bool): Whether to keep runtime state in the workspace.

        Returns:
            List[str]: Command and arguments.
        """
        command = [self.tools.runtime_binary]
        if rootless:
            command.extend(["--root", str(workspace.subpath(self.ROOT_DIR))])
        command.extend(["run", identity])
        return command

    def launch(self,
               bundle: Bundle,
               workspace: Workspace,
               identity: str,
               rootless: bool = False,
               test_mode: bool = False) -> Optional[int]:
        """
        Runs the container to completion.

        Args:
            bundle (Bundle): The prepared bundle, used as working directory.
            workspace (Workspace): The run's workspace.
            identity (str): Container name.
            rootless (bool): Run with an isolated runtime state directory.
            test_mode (bool): Wait for a line on stdin instead of starting anything.

        Returns:
            Optional[int]: The container's exit code, None if it died from a signal.
        """
        command = self.build_command(workspace, identity, rootless)

        if test_mode:
            print(f"info: Test mode, not running: {' '.join(command)}", file=sys.stderr)
            print(f"info: Bundle ready in {bundle.root}, press Enter to continue", file=sys.stderr)
            (self.stdin or sys.stdin).readline()
            return 0

        print(f"info: Starting container {identity}", file=sys.stderr)
        return self._runc.run_foreground(
            command,
            working_dir=str(bundle.root),
            failure_message="failed to start the container",
        )
