# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from .main import main

__all__ = ["main"]
