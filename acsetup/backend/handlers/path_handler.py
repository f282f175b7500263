#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Path Handler Module
Resolves the Steam installation and the Assetto Corsa game directory
"""

import os
import re
import logging
from pathlib import Path
from typing import List, Optional

import vdf

from ..core.exceptions import PreconditionError
from ..data.game_data import GAME_DIR_NAME
from ..models.configuration import SteamInstallation, STEAM_NATIVE, STEAM_FLATPAK
from ...shared.colors import bold
from ...shared.steam_utils import detect_steam_installation_dirs

# Initialize logger
logger = logging.getLogger(__name__)


def normalize_path_input(raw: str) -> Path:
    """
    Turn user input such as '~/Games/assettocorsa/' into an absolute path:
    whitespace trimmed, one trailing slash dropped, ~ expanded.
    """
    path = raw.strip()
    if len(path) > 1 and path.endswith('/'):
        path = path[:-1]
    return Path(os.path.expanduser(path))


def validate_game_dir(raw: str) -> Optional[Path]:
    """Return the normalized path if it is an existing 'assettocorsa' directory."""
    if not raw.strip():
        return None
    path = normalize_path_input(raw)
    if path.is_dir() and path.name == GAME_DIR_NAME:
        return path.resolve()
    logger.debug(f"Rejected game directory input: {raw!r}")
    return None


class PathHandler:
    """
    Handles discovery of Steam and game paths
    """

    def __init__(self, menu_handler, home: Optional[Path] = None):
        self.menu_handler = menu_handler
        self.home = home

    @staticmethod
    def get_library_paths(library_vdf: Path) -> List[Path]:
        """Library root folders listed in a libraryfolders.vdf file."""
        with open(library_vdf, 'r', encoding='utf-8', errors='replace') as f:
            content = f.read()

        paths = []
        try:
            data = vdf.loads(content)
            libraries = data.get('libraryfolders', data.get('LibraryFolders', {}))
            for key in libraries:
                entry = libraries[key]
                if isinstance(entry, dict) and entry.get('path'):
                    paths.append(Path(entry['path']))
        except (SyntaxError, ValueError) as e:
            logger.warning(f"Could not parse {library_vdf} as VDF ({e}), scanning for path entries")

        if not paths:
            for match in re.finditer(r'"path"\s*"([^"]+)"', content):
                paths.append(Path(match.group(1).replace('\\\\', '\\')))

        logger.debug(f"Steam libraries in {library_vdf}: {paths}")
        return paths

    @classmethod
    def find_game_in_libraries(cls, library_vdf: Path) -> Optional[Path]:
        """First library that contains steamapps/common/assettocorsa."""
        for library in cls.get_library_paths(library_vdf):
            candidate = library / "steamapps" / "common" / GAME_DIR_NAME
            if candidate.is_dir():
                logger.info(f"Found game directory in Steam library: {candidate}")
                return candidate
        return None

    def resolve_steam_installation(self) -> SteamInstallation:
        """Pick the Steam installation to use, asking when both exist."""
        native_dir, flatpak_dir = detect_steam_installation_dirs(self.home)

        if native_dir and flatpak_dir:
            print("Steam is installed both as a native package and Flatpak.")
            choice = self.menu_handler.select(
                "Select which installation of Steam to use: ", ["Native", "Flatpak"]
            )
            steam = (SteamInstallation(STEAM_NATIVE, native_dir) if choice == "Native"
                     else SteamInstallation(STEAM_FLATPAK, flatpak_dir))
        elif native_dir:
            print("Native installation of Steam found.")
            steam = SteamInstallation(STEAM_NATIVE, native_dir)
        elif flatpak_dir:
            print("Flatpak installation of Steam found.")
            steam = SteamInstallation(STEAM_FLATPAK, flatpak_dir)
        else:
            raise PreconditionError("Steam installation not found.")

        logger.info(f"Using {steam.kind} Steam at {steam.root}")
        return steam

    def find_game_dir_candidate(self, steam: SteamInstallation) -> Optional[Path]:
        """Default location first, then the libraries in libraryfolders.vdf."""
        if steam.default_game_dir.is_dir():
            return steam.default_game_dir

        library_vdf = steam.library_folders_vdf
        if not library_vdf.is_file():
            logger.warning(f"No steam library file found at: '{library_vdf}'")
            print(f"No steam library file found at: '{library_vdf}'.")
            return None
        try:
            return self.find_game_in_libraries(library_vdf)
        except OSError as e:
            logger.warning(f"Could not read {library_vdf}: {e}")
            return None

    def resolve_game_dir(self, steam: SteamInstallation) -> Path:
        """Auto-detect the game directory and confirm it, or ask for it."""
        candidate = self.find_game_dir_candidate(steam)
        if candidate is not None:
            print(f"Found {bold(str(candidate))}")
            if self.menu_handler.ask("Is that the right installation?"):
                return candidate
        else:
            print("Could not find Assetto Corsa in the default path.")
        return self.prompt_game_dir()

    def prompt_game_dir(self) -> Path:
        print(f"Enter path to {bold('steamapps/common/' + GAME_DIR_NAME)}:")
        game_dir = self.menu_handler.prompt_for_path(validate_game_dir, initial_text=os.getcwd() + "/")
        logger.info(f"User selected game directory: {game_dir}")
        return game_dir
