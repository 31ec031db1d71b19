"""
Configuration of the external tools the pipeline shells out to.
"""
import os
from typing import ClassVar, Dict, Optional
from dotenv import dotenv_values
from pydantic import BaseModel


class ToolConfig(BaseModel):
    """
    Names or paths of the archive, unpack and runtime tools, plus an
    optional parent directory for workspaces.
    """
    tar_binary: str = "tar"
    unpack_binary: str = "umoci"
    runtime_binary: str = "runc"
    temp_root: Optional[str] = None

    ENV_KEYS: ClassVar[Dict[str, str]] = {
        "SHIPC_TAR": "tar_binary",
        "SHIPC_UMOCI": "unpack_binary",
        "SHIPC_RUNC": "runtime_binary",
        "SHIPC_TMPDIR": "temp_root",
    }

    @classmethod
    def from_env(cls, env_file: Optional[str] = None,
                 environ: Optional[Dict[str, str]] = None) -> "ToolConfig":
        """
        Builds the configuration from ``SHIPC_*`` variables.

        Values from the optional env file are overridden by the process
        environment.

        :param env_file: Path to a dotenv file.
        :param environ: Environment to read instead of ``os.environ``.
        :return: The merged configuration.
        """
        merged: Dict[str, Optional[str]] = {}
        if env_file and os.path.exists(env_file):
            merged.update(dotenv_values(env_file))
        merged.update(os.environ if environ is None else environ)

        values = {}
        for key, field_name in cls.ENV_KEYS.items():
            value = merged.get(key)
            if value:
                values[field_name] = value
        return cls(**values)
