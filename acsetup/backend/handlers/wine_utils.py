#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Wine Utilities Module
Edits to the Wine prefix registry files
"""

import logging
from pathlib import Path

# Initialize logger
logger = logging.getLogger(__name__)

# Registry files may contain bytes that are not valid UTF-8; keep them intact
_REG_ENCODING = dict(encoding='utf-8', errors='surrogateescape', newline='')


class WineUtils:
    """
    Utilities for wine-related operations
    """

    @staticmethod
    def registry_contains(reg_file: Path, text: str) -> bool:
        """True if text occurs anywhere in the registry file."""
        with open(reg_file, 'r', **_REG_ENCODING) as f:
            return text in f.read()

    @staticmethod
    def add_dll_override(reg_file: Path, dll: str, override_line: str, anchor: str) -> bool:
        """
        Insert override_line after every line containing anchor, unless the
        registry already mentions dll.

        Returns True if the file was changed.
        """
        with open(reg_file, 'r', **_REG_ENCODING) as f:
            lines = f.readlines()

        if any(dll in line for line in lines):
            logger.info(f"DLL override '{dll}' already present in {reg_file}")
            return False

        new_lines = []
        inserted = 0
        for line in lines:
            new_lines.append(line)
            if anchor in line:
                ending = '\r\n' if line.endswith('\r\n') else '\n'
                if not line.endswith('\n'):
                    new_lines[-1] = line + ending
                new_lines.append(override_line + ending)
                inserted += 1

        if not inserted:
            logger.warning(f"Anchor {anchor} not found in {reg_file}; DLL override '{dll}' not added")
            return False

        with open(reg_file, 'w', **_REG_ENCODING) as f:
            f.writelines(new_lines)
        logger.info(f"Added DLL override '{dll}' to {reg_file}")
        return True
