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
Resolution of image arguments into unpacked OCI image layouts.
Accepts either an image directory or a gzipped tarball of one.
"""

import sys
from pathlib import Path
from typing import Optional, Union

from ..errors import UserError
from ..MANAGERS.workspace_manager import Workspace
from ..MODELS.image_source import ImageKind, ImageSource
from ..MODELS.tool_config import ToolConfig
from ..RUNNERS.process_runner import ProcessRunner


class ImageResolver:
    """
    Classifies an image path and extracts archives into the workspace.
    """

    ARCHIVE_SUFFIX = ".tar.gz"
    IMAGE_DIR = "image"

    def __init__(self, tools: Optional[ToolConfig] = None):
        """
        Initialize the resolver.

        Args:
            tools: External tool configuration.
        """
        self.tools = tools or ToolConfig()
        self._tar = ProcessRunner("tar")

    def resolve(self, image_path: Union[str, Path], workspace: Workspace) -> ImageSource:
        """
        Resolve an image argument.

        Args:
            image_path: Path to an image directory or a .tar.gz archive.
            workspace: Workspace archives are extracted into.

        Returns:
            The resolved image source.
        """
        if not str(image_path):
            raise UserError("invalid image path", "image path is empty")
        try:
            path = Path(image_path).resolve(strict=True)
            is_file = path.is_file()
            is_dir = path.is_dir()
        except (OSError, RuntimeError) as e:
            raise UserError("invalid image path", str(e)) from e

        if is_dir:
            return ImageSource(kind=ImageKind.DIRECTORY, original_path=path, image_dir=path)

        if not is_file:
            raise UserError("image is neither a directory nor a file", str(path))

        # the name given by the caller counts, not a symlink target's
        if not Path(image_path).name.endswith(self.ARCHIVE_SUFFIX):
            raise UserError("file is not a tarball", str(image_path))

        image_dir = workspace.subpath(self.IMAGE_DIR)
        print(f"info: Uncompressing image into {image_dir}", file=sys.stderr)
        self._tar.run_checked(
            self.extract_command(path, image_dir),
            "failed to un-tar image",
        )
        return ImageSource(kind=ImageKind.ARCHIVE, original_path=path, image_dir=image_dir)

    def extract_command(self, archive: Path, destination: Path) -> list:
        """Command extracting the archive, dropping its top-level directory."""
        return [
            self.tools.tar_binary,
            "-C", str(destination),
            "--strip-components", "1",
            "-xf", str(archive),
        ]
