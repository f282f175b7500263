#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Protontricks Handler Module
Handles detection and invocation of Protontricks
"""

import shlex
import shutil
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..data.game_data import APP_ID, FLATPAK_PROTONTRICKS_APP_ID
from .subprocess_utils import get_clean_subprocess_env

# Initialize logger
logger = logging.getLogger(__name__)


class ProtontricksHandler:
    """
    Runs winetricks verbs in the game's prefix through protontricks.

    protontricks may be a native executable, a shell alias (commonly to the
    Flatpak) or only available as the Flatpak itself.
    """

    def __init__(self, runner, steam_root: Optional[Path] = None,
                 aliases: Optional[Dict[str, str]] = None):
        self.runner = runner
        self.steam_root = steam_root
        self.aliases = aliases or {}
        self._command = None

    def detect_protontricks(self) -> List[str]:
        """Command prefix used to invoke protontricks."""
        if self._command is not None:
            return self._command

        alias = self.aliases.get("protontricks")
        if alias:
            self._command = shlex.split(alias)
            logger.info(f"Using protontricks alias: {alias}")
        elif shutil.which("protontricks"):
            self._command = ["protontricks"]
            logger.info("Using native protontricks")
        else:
            self._command = ["flatpak", "run", FLATPAK_PROTONTRICKS_APP_ID]
            logger.info("protontricks not in PATH, falling back to the Flatpak")
        return self._command

    def _get_env(self) -> dict:
        env = get_clean_subprocess_env()
        # Suppress Wine debug output
        env['WINEDEBUG'] = '-all'
        # Stops protontricks from asking which Steam installation to use
        if self.steam_root:
            env['STEAM_DIR'] = str(self.steam_root)
        return env

    def run_protontricks(self, *args):
        """Run protontricks with args, raising CommandFailedError on failure."""
        cmd = self.detect_protontricks() + [str(a) for a in args]
        return self.runner.check(*cmd, env=self._get_env())

    def install_components(self, *verbs, background_wineserver: bool = True):
        """Install winetricks verbs (e.g. 'corefonts') into the game's prefix."""
        args = [] if background_wineserver else ["--no-background-wineserver"]
        logger.info(f"Installing {', '.join(verbs)} into prefix {APP_ID}")
        return self.run_protontricks(*args, APP_ID, *verbs)
