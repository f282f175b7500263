#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Menu Handler Module
Interactive prompts: yes/no confirmation, numbered selection and path input
"""

import os
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..core.exceptions import UserAbortError
from ...shared.colors import COLOR_PROMPT, COLOR_SELECTION, COLOR_ERROR, COLOR_RESET

logger = logging.getLogger(__name__)

# --- Readline for line editing and tab completion ---
try:
    import readline
    READLINE_AVAILABLE = True
except ImportError:
    READLINE_AVAILABLE = False


def _path_completer(text, state):
    """Complete filesystem paths, expanding a leading ~."""
    import glob
    expanded = os.path.expanduser(text)
    matches = []
    for match in glob.glob(expanded + '*'):
        if os.path.isdir(match):
            match += os.sep
        if text.startswith('~'):
            match = '~' + match[len(os.path.expanduser('~')):]
        matches.append(match)
    return matches[state] if state < len(matches) else None


class MenuHandler:
    """
    Blocking terminal prompts used by the setup pipeline.

    There are no defaults and no timeouts: every prompt repeats until it gets
    a usable answer. End of input is treated as the user aborting.
    """

    def __init__(self, input_func: Callable[[str], str] = input):
        self.input_func = input_func

    def _read(self, prompt: str) -> str:
        try:
            return self.input_func(prompt)
        except EOFError:
            print()
            raise UserAbortError("No input available, aborting.")

    def ask(self, question: str) -> bool:
        """Ask a yes/no question until the answer starts with y or n."""
        while True:
            answer = self._read(f"{COLOR_PROMPT}{question} [y/n]: {COLOR_RESET}").strip().lower()
            if answer.startswith('y'):
                logger.debug(f"User answered yes to: {question}")
                return True
            if answer.startswith('n'):
                logger.debug(f"User answered no to: {question}")
                return False

    def select(self, prompt: str, options: Sequence[str]) -> str:
        """Show a numbered list and return the chosen option."""
        for index, option in enumerate(options, start=1):
            print(f"{COLOR_SELECTION}{index}){COLOR_RESET} {option}")
        while True:
            choice = self._read(f"{COLOR_PROMPT}{prompt}{COLOR_RESET}").strip()
            if choice.isdigit() and 1 <= int(choice) <= len(options):
                selected = options[int(choice) - 1]
                logger.debug(f"User selected '{selected}'")
                return selected
            print(f"{COLOR_ERROR}Invalid selection. Please enter a number between 1 and {len(options)}.{COLOR_RESET}")

    def prompt_for_path(self, validator: Callable[[str], Optional[Path]],
                        initial_text: str = "") -> Path:
        """
        Read paths until validator accepts one.

        validator receives the raw input and returns the normalized Path, or
        None if the input is not acceptable.
        """
        while True:
            raw = self._read_with_initial_text("> ", initial_text)
            path = validator(raw)
            if path is not None:
                return path
            print(f"{COLOR_ERROR}Invalid path.{COLOR_RESET}")
            if READLINE_AVAILABLE:
                readline.add_history(raw)

    def _read_with_initial_text(self, prompt: str, initial_text: str) -> str:
        if not READLINE_AVAILABLE or self.input_func is not input:
            return self._read(prompt)
        old_completer = readline.get_completer()
        readline.set_completer_delims(' \t\n;')
        readline.set_completer(_path_completer)
        readline.parse_and_bind('tab: complete')
        readline.set_startup_hook(lambda: readline.insert_text(initial_text))
        try:
            return self._read(prompt)
        finally:
            readline.set_startup_hook()
            readline.set_completer(old_completer)
