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
Scoped temporary workspace holding the extracted image and the bundle.
"""
import os
import shutil
import stat
import sys
import tempfile
from pathlib import Path
from typing import Optional

from ..errors import InternalError


class Workspace:
    """
    An exclusively owned temporary directory, deleted when the scope ends.

    Use as a context manager so the directory is removed on every exit
    path, including exceptions and interrupts.
    """

    PREFIX = "shipc"

    def __init__(self, temp_root: Optional[str] = None):
        """
        Initialize the workspace.

        Args:
            temp_root: Parent directory. Defaults to the system temp root.
        """
        self.temp_root = temp_root
        self._path: Optional[Path] = None

    @property
    def path(self) -> Path:
        """Root of the workspace."""
        if self._path is None:
            raise InternalError("workspace has not been acquired")
        return self._path

    @property
    def is_active(self) -> bool:
        return self._path is not None

    def acquire(self) -> "Workspace":
        """
        Create the temporary directory.

        Returns:
            The workspace itself.
        """
        if self._path is not None:
            return self
        try:
            self._path = Path(tempfile.mkdtemp(prefix=self.PREFIX, dir=self.temp_root))
        except OSError as e:
            raise InternalError("cannot create temporary directory", str(e)) from e
        return self

    def subpath(self, name: str) -> Path:
        """
        Return ``name`` under the workspace, creating it on first use.

        Args:
            name: Subdirectory name.

        Returns:
            Path to the subdirectory.
        """
        path = self.path / name
        try:
            path.mkdir(exist_ok=True)
        except OSError as e:
            raise InternalError(f"cannot create {name} directory", str(e)) from e
        return path

    def release(self) -> None:
        """Delete the workspace. Safe to call more than once."""
        path, self._path = self._path, None
        if path is None or not os.path.exists(path):
            return
        try:
            shutil.rmtree(path)
        except OSError:
            # rootless unpacks can leave directories without write permission
            self._make_writable(path)
            try:
                shutil.rmtree(path)
            except OSError as e:
                print(f"error: failed to remove temporary directory {path}: {e}", file=sys.stderr)

    @staticmethod
    def _make_writable(path: Path) -> None:
        for root, dirs, _ in os.walk(path):
            for name in [root] + [os.path.join(root, d) for d in dirs]:
                try:
                    os.chmod(name, os.stat(name).st_mode | stat.S_IRWXU)
                except OSError:
                    pass

    def __enter__(self) -> "Workspace":
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
