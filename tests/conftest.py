"""
Shared fixtures: an OCI-like image directory and stand-in scripts for
umoci and runc, so the pipeline runs without either being installed.
"""
import json
import os
import stat
import tarfile

import pytest
from shipc.MODELS.tool_config import ToolConfig


BASE_SPEC = {
    "ociVersion": "1.0.2",
    "process": {"terminal": True, "args": ["sh"], "cwd": "/"},
    "root": {"path": "rootfs"},
    "hostname": "umoci-default",
    "mounts": [
        {"destination": "/proc", "type": "proc", "source": "proc"},
    ],
    "linux": {"namespaces": [{"type": "pid"}, {"type": "mount"}]},
}

FAKE_UMOCI = """#!/bin/sh
echo "$@" > "{log_dir}/umoci.args"
image=""
bundle=""
while [ $# -gt 0 ]; do
  case "$1" in
    --image) image="$2"; shift 2 ;;
    unpack|--rootless) shift ;;
    *) bundle="$1"; shift ;;
  esac
done
if [ ! -f "$image/config.json" ]; then
  echo "umoci: cannot open image $image" >&2
  exit 1
fi
mkdir -p "$bundle/rootfs"
cp "$image/config.json" "$bundle/config.json"
"""

FAKE_RUNC = """#!/bin/sh
echo "$@" > "{log_dir}/runc.args"
pwd > "{log_dir}/runc.cwd"
cp config.json "{log_dir}/runc.config.json"
exit {exit_code}
"""


def write_script(path, content):
    path.write_text(content)
    os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


def make_image_dir(path, spec=None):
    """Create a directory standing in for an OCI image layout."""
    path.mkdir(parents=True, exist_ok=True)
    (path / "oci-layout").write_text('{"imageLayoutVersion": "1.0.0"}')
    (path / "config.json").write_text(json.dumps(spec if spec is not None else BASE_SPEC))
    return path


def make_image_archive(path, image_dir, wrapper="image"):
    """Pack an image directory into a .tar.gz with one top-level directory."""
    with tarfile.open(path, "w:gz") as tar:
        tar.add(str(image_dir), arcname=wrapper)
    return path


@pytest.fixture
def tool_logs(tmp_path):
    logs = tmp_path / "logs"
    logs.mkdir()
    return logs


@pytest.fixture
def temp_root(tmp_path):
    root = tmp_path / "workspaces"
    root.mkdir()
    return root


@pytest.fixture
def make_tools(tmp_path, tool_logs, temp_root):
    """Factory building a ToolConfig that points at the fake tools."""
    def factory(runc_exit="0", umoci=FAKE_UMOCI, runc=None):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        umoci_path = write_script(bin_dir / "umoci", umoci.format(log_dir=tool_logs))
        runc_script = runc or FAKE_RUNC.format(log_dir=tool_logs, exit_code=runc_exit)
        runc_path = write_script(bin_dir / "runc", runc_script)
        return ToolConfig(
            unpack_binary=umoci_path,
            runtime_binary=runc_path,
            temp_root=str(temp_root),
        )
    return factory


@pytest.fixture
def tools(make_tools):
    return make_tools()


@pytest.fixture
def image_dir(tmp_path):
    return make_image_dir(tmp_path / "oci-image")
