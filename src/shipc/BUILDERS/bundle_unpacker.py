"""
Builder that turns an OCI image layout into a runtime bundle.
"""
import sys
from pathlib import Path
from typing import List, Optional

from ..errors import InternalError
from ..MANAGERS.workspace_manager import Workspace
from ..MODELS.image_source import Bundle
from ..MODELS.tool_config import ToolConfig
from ..RUNNERS.process_runner import ProcessRunner


class BundleUnpacker:
    """
    Invokes the unpack tool to materialize a bundle inside the workspace.
    """
    BUNDLE_DIR = "bundle"

    def __init__(self, tools: Optional[ToolConfig] = None):
        self.tools = tools or ToolConfig()
        self._umoci = ProcessRunner("umoci")

    def unpack_command(self, image_dir: Path, rootless: bool) -> List[str]:
        command = [self.tools.unpack_binary, "unpack"]
        if rootless:
            command.append("--rootless")
        command.extend(["--image", str(image_dir), self.BUNDLE_DIR])
        return command

    def unpack(self, image_dir: Path, workspace: Workspace, rootless: bool = False) -> Bundle:
        """
        Unpacks the image into ``<workspace>/bundle``.

        :param image_dir: The OCI image layout to unpack.
        :param workspace: The workspace the bundle is created in.
        :param rootless: Whether to unpack without root privileges.
        :return: The unpacked bundle.
        """
        print(f"info: Unpacking image {image_dir}", file=sys.stderr)
        self._umoci.run_checked(
            self.unpack_command(image_dir, rootless),
            "failed to unpack image",
            working_dir=str(workspace.path),
        )

        bundle = Bundle(root=workspace.path / self.BUNDLE_DIR)
        if not bundle.spec_path.is_file():
            raise InternalError("invalid bundle", f"{bundle.spec_path} is missing")
        return bundle
