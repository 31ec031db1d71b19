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
Orchestrates one run: workspace, image, bundle, identity, spec, runtime.
"""
import sys
from typing import Optional, TextIO

from ..BUILDERS.bundle_unpacker import BundleUnpacker
from ..ISOLATION.runtime_spec import RuntimeSpecMutator
from ..MODELS.run_request import RunRequest
from ..MODELS.tool_config import ToolConfig
from ..REGISTRY.image_resolver import ImageResolver
from ..RUNNERS.runtime_launcher import RuntimeLauncher
from ..UTILS.identity import IdentityGenerator
from .workspace_manager import Workspace


class RunOrchestrator:
    """
    Runs the staging pipeline stages strictly in order.
    The first failing stage aborts the run; the workspace is always removed.
    """
    def __init__(self,
                 tools: Optional[ToolConfig] = None,
                 identity_generator: Optional[IdentityGenerator] = None,
                 stdin: Optional[TextIO] = None):
        """
        Initializes the orchestrator.

        :param tools: External tool configuration.
        :param identity_generator: Source of container names.
        :param stdin: Stream read in test mode.
        """
        self.tools = tools or ToolConfig()
        self.resolver = ImageResolver(self.tools)
        self.unpacker = BundleUnpacker(self.tools)
        self.identities = identity_generator or IdentityGenerator()
        self.mutator = RuntimeSpecMutator()
        self.launcher = RuntimeLauncher(self.tools, stdin=stdin)

    def run(self, request: RunRequest) -> Optional[int]:
        """
        Stages the image and runs it.

        :param request: The validated run request.
        :return: The container's exit code, None if it was killed by a signal.
        """
        with Workspace(self.tools.temp_root) as workspace:
            self._log_request(request, workspace)

            source = self.resolver.resolve(request.image, workspace)
            print(f"info: Using {source.kind.value} image {source.image_dir}", file=sys.stderr)

            bundle = self.unpacker.unpack(source.image_dir, workspace, request.rootless)

            identity = self.identities.generate()
            print(f"info: Container name: {identity}", file=sys.stderr)

            self.mutator.mutate(bundle, identity, request.volumes)

            return self.launcher.launch(
                bundle,
                workspace,
                identity,
                rootless=request.rootless,
                test_mode=request.test_mode,
            )

    def _log_request(self, request: RunRequest, workspace: Workspace):
        print(f"info: Temporary directory: {workspace.path}", file=sys.stderr)
        mode = " in rootless mode" if request.rootless else ""
        print(f"info: Running image {request.image}{mode}", file=sys.stderr)
        for volume in request.volumes:
            print(f"info:   with volume {volume}", file=sys.stderr)
