"""
Models describing a single container run request and its volume bindings.
"""
from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field


class Volume(BaseModel):
    """
    A host path bound into the container at a destination path.
    """
    model_config = ConfigDict(frozen=True)

    source: str = Field(min_length=1)
    destination: str = Field(min_length=1)

    @classmethod
    def parse(cls, value: str) -> "Volume":
        """
        Parses an ``ORIGIN:DESTINATION`` volume string.

        Args:
            value (str): The raw volume argument.

        Returns:
            Volume: The parsed binding.
        """
        parts = value.split(":")
        if len(parts) != 2 or not all(parts):
            raise ValueError("Volume should be origin:destination")
        return cls(source=parts[0], destination=parts[1])

    def __str__(self) -> str:
        return f"{self.source}:{self.destination}"


class RunRequest(BaseModel):
    """
    Validated configuration for one run of the pipeline.
    """
    model_config = ConfigDict(frozen=True)

    image: str
    rootless: bool = False
    volumes: Tuple[Volume, ...] = ()
    test_mode: bool = False
