# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from local_actions.document import Position

CURSOR = "<|>"


def split_cursor(text: str):
    """Remove the cursor marker from *text* and return ``(text, position)``."""
    for line_number, line in enumerate(text.split("\n")):
        column = line.find(CURSOR)
        if column != -1:
            return text.replace(CURSOR, "", 1), Position(line_number, column)
    raise ValueError("no cursor marker in text")
