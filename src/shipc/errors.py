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
Error types raised by the staging pipeline.

Every error carries a short primary message and an optional secondary
detail, usually the error stream of a failing external tool.
"""
from typing import Optional


class ShipcError(Exception):
    """Base class for all pipeline failures."""

    show_hint = False

    def __init__(self, message: str, secondary: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.secondary = secondary.strip() if secondary else None

    def __str__(self) -> str:
        if self.secondary:
            return f"{self.message}: {self.secondary}"
        return self.message


class UserError(ShipcError):
    """
    Bad input: invalid image path, non-tarball file, invalid volume source,
    or an external tool reporting a failure for the given input.
    """

    show_hint = True


class InternalError(ShipcError):
    """
    Contract violation by the environment or a trusted step: workspace
    creation, malformed bundles, write failures, tools that cannot launch.
    """
