#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
INI Handler Module
Line-based reads and edits of the Custom Shaders Patch config files

CSP's ini files are not strict INI (duplicate keys, comments after values),
so they are handled as text rather than with configparser.
"""

import logging
from pathlib import Path
from typing import Optional

# Initialize logger
logger = logging.getLogger(__name__)

_INI_ENCODING = dict(encoding='utf-8', errors='surrogateescape', newline='')


def get_ini_value(ini_file: Path, key: str) -> Optional[str]:
    """Value of the first KEY=value line, or None if the file or key is absent."""
    if not ini_file.is_file():
        return None
    prefix = f"{key}="
    with open(ini_file, 'r', **_INI_ENCODING) as f:
        for line in f:
            stripped = line.strip()
            if stripped.startswith(prefix):
                return stripped[len(prefix):].strip()
    return None


def has_line_containing(ini_file: Path, text: str) -> bool:
    if not ini_file.is_file():
        return False
    with open(ini_file, 'r', **_INI_ENCODING) as f:
        return any(text in line for line in f)


def truncate_from_section(ini_file: Path, section_header: str) -> bool:
    """
    Delete the first line containing section_header and everything after it.

    Returns True if the file was changed.
    """
    with open(ini_file, 'r', **_INI_ENCODING) as f:
        lines = f.readlines()

    for index, line in enumerate(lines):
        if section_header in line:
            with open(ini_file, 'w', **_INI_ENCODING) as f:
                f.writelines(lines[:index])
            logger.info(f"Removed {section_header} and {len(lines) - index - 1} following lines from {ini_file}")
            return True

    logger.debug(f"{section_header} not found in {ini_file}, nothing to remove")
    return False
