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
Unit tests for image resolution.
"""
import json
import os
import pytest
from conftest import make_image_archive, make_image_dir
from shipc.errors import InternalError, UserError
from shipc.MANAGERS.workspace_manager import Workspace
from shipc.MODELS.image_source import ImageKind
from shipc.MODELS.tool_config import ToolConfig
from shipc.REGISTRY.image_resolver import ImageResolver


@pytest.fixture
def workspace(temp_root):
    with Workspace(str(temp_root)) as ws:
        yield ws


class TestImageResolver:
    """Tests for ImageResolver."""

    def test_directory_used_directly(self, image_dir, workspace):
        """Test a directory image needs no extraction."""
        source = ImageResolver().resolve(str(image_dir), workspace)
        assert source.kind == ImageKind.DIRECTORY
        assert source.image_dir == image_dir.resolve()
        assert not (workspace.path / "image").exists()

    def test_directory_through_symlink(self, image_dir, workspace, tmp_path):
        """Test symlinks are canonicalized."""
        link = tmp_path / "link"
        link.symlink_to(image_dir)
        source = ImageResolver().resolve(str(link), workspace)
        assert source.image_dir == image_dir.resolve()

    def test_missing_path(self, tmp_path, workspace):
        """Test a non-existent image is a user error."""
        with pytest.raises(UserError) as exc:
            ImageResolver().resolve(str(tmp_path / "nope"), workspace)
        assert exc.value.message == "invalid image path"

    def test_file_without_tarball_suffix(self, tmp_path, workspace):
        """Test a .tgz file is rejected before anything is extracted."""
        archive = tmp_path / "x.tgz"
        archive.write_bytes(b"not really")
        with pytest.raises(UserError) as exc:
            ImageResolver().resolve(str(archive), workspace)
        assert exc.value.message == "file is not a tarball"
        assert os.listdir(workspace.path) == []

    def test_archive_extracted_with_strip(self, tmp_path, workspace):
        """Test the archive's wrapper directory is absorbed."""
        image = make_image_dir(tmp_path / "src-image")
        archive = make_image_archive(tmp_path / "image.tar.gz", image, wrapper="busybox")

        source = ImageResolver().resolve(str(archive), workspace)

        assert source.kind == ImageKind.ARCHIVE
        assert source.image_dir == workspace.path / "image"
        spec = json.loads((source.image_dir / "config.json").read_text())
        assert spec["hostname"] == "umoci-default"
        assert (source.image_dir / "oci-layout").exists()

    def test_corrupt_archive(self, tmp_path, workspace):
        """Test tar failures are user errors carrying tar's message."""
        archive = tmp_path / "broken.tar.gz"
        archive.write_bytes(b"this is not gzip data")
        with pytest.raises(UserError) as exc:
            ImageResolver().resolve(str(archive), workspace)
        assert exc.value.message == "failed to un-tar image"
        assert exc.value.secondary

    def test_tar_not_installed(self, tmp_path, workspace):
        """Test a missing tar binary is an internal error."""
        image = make_image_dir(tmp_path / "src-image")
        archive = make_image_archive(tmp_path / "image.tar.gz", image)
        resolver = ImageResolver(ToolConfig(tar_binary=str(tmp_path / "no-tar")))
        with pytest.raises(InternalError):
            resolver.resolve(str(archive), workspace)

    def test_extract_command(self, tmp_path):
        """Test the tar invocation."""
        command = ImageResolver().extract_command(tmp_path / "a.tar.gz", tmp_path / "image")
        assert command == [
            "tar", "-C", str(tmp_path / "image"),
            "--strip-components", "1",
            "-xf", str(tmp_path / "a.tar.gz"),
        ]

    def test_archive_suffix_taken_from_argument(self, tmp_path, workspace):
        """Test a .tar.gz symlink to a differently named blob is accepted."""
        image = make_image_dir(tmp_path / "src-image")
        blob = make_image_archive(tmp_path / "sha256-blob", image)
        link = tmp_path / "img.tar.gz"
        link.symlink_to(blob)

        source = ImageResolver().resolve(str(link), workspace)

        assert source.kind == ImageKind.ARCHIVE
        assert (source.image_dir / "config.json").exists()

    def test_symlink_without_suffix_rejected(self, tmp_path, workspace):
        """Test the link name must carry the suffix even if its target does."""
        image = make_image_dir(tmp_path / "src-image")
        archive = make_image_archive(tmp_path / "real.tar.gz", image)
        link = tmp_path / "x.tgz"
        link.symlink_to(archive)
        with pytest.raises(UserError) as exc:
            ImageResolver().resolve(str(link), workspace)
        assert exc.value.message == "file is not a tarball"
