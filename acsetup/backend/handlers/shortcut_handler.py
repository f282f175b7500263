#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Shortcut Handler Module
Handles the Assetto Corsa desktop entry and the acmanager:// URI handler
"""

import logging
from pathlib import Path
from typing import List

from ..data.game_data import ACMANAGER_MIME_TYPE, DESKTOP_ENTRY_NAME

# Initialize logger
logger = logging.getLogger(__name__)

# Keep bytes that are not valid UTF-8 intact on rewrite
_TEXT_ENCODING = dict(encoding='utf-8', errors='surrogateescape')


def collapse_adjacent_duplicates(lines: List[str]) -> List[str]:
    """Drop lines identical to the line right before them."""
    result = []
    for line in lines:
        if result and result[-1] == line:
            continue
        result.append(line)
    return result


class ShortcutHandler:
    """
    Edits the desktop entry Steam created for the game and registers
    Content Manager as the handler for acmanager:// links.
    """

    def __init__(self, runner, desktop_entry: Path, mimeapps_list: Path):
        self.runner = runner
        self.desktop_entry = desktop_entry
        self.mimeapps_list = mimeapps_list

    @property
    def handler_association(self) -> str:
        return f"{ACMANAGER_MIME_TYPE}={DESKTOP_ENTRY_NAME}"

    def desktop_entry_exists(self) -> bool:
        return self.desktop_entry.is_file()

    def clean_mime_associations(self) -> bool:
        """
        Remove earlier acmanager associations from mimeapps.list and collapse
        the adjacent duplicate lines that removal can leave behind.

        Returns True if the file was changed.
        """
        if not self.mimeapps_list.is_file():
            logger.debug(f"{self.mimeapps_list} does not exist, nothing to clean")
            return False

        original = self.mimeapps_list.read_text(**_TEXT_ENCODING)
        content = original.replace(f"{self.handler_association};", "")
        content = content.replace(self.handler_association, "")

        trailing_newline = content.endswith('\n')
        lines = collapse_adjacent_duplicates(content.splitlines())
        content = '\n'.join(lines) + ('\n' if trailing_newline else '')

        if content == original:
            return False
        self.mimeapps_list.write_text(content, **_TEXT_ENCODING)
        logger.info(f"Cleaned previous acmanager associations from {self.mimeapps_list}")
        return True

    def rewrite_launch_command(self, old_command: str, new_command: str) -> bool:
        """Replace old_command with new_command everywhere in the desktop entry."""
        content = self.desktop_entry.read_text(**_TEXT_ENCODING)
        if old_command not in content:
            logger.debug(f"'{old_command}' not found in {self.desktop_entry}")
            return False
        self.desktop_entry.write_text(content.replace(old_command, new_command), **_TEXT_ENCODING)
        logger.info(f"Desktop entry now launches with '{new_command}'")
        return True

    def register_uri_handler(self) -> None:
        """Make the desktop entry the default handler for acmanager:// links."""
        self.runner.check("gio", "mime", ACMANAGER_MIME_TYPE, DESKTOP_ENTRY_NAME)
