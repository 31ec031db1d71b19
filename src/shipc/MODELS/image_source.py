"""
Models for resolved images and unpacked runtime bundles.
"""
from enum import Enum
from pathlib import Path
from typing import ClassVar
from pydantic import BaseModel


class ImageKind(str, Enum):
    """
    The form an image argument was given in.
    """
    DIRECTORY = "directory"
    ARCHIVE = "archive"


class ImageSource(BaseModel):
    """
    An image argument after resolution. ``image_dir`` is always an
    unpacked OCI image layout, extracted into the workspace for archives.
    """
    kind: ImageKind
    original_path: Path
    image_dir: Path


class Bundle(BaseModel):
    """
    A runtime bundle: a root filesystem plus its config.json.
    """
    SPEC_FILE: ClassVar[str] = "config.json"

    root: Path

    @property
    def spec_path(self) -> Path:
        return self.root / self.SPEC_FILE
