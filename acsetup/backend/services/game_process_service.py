"""
Game Process Service

Finds and stops a running Assetto Corsa before its files are touched.
"""

import logging
from typing import List

import psutil

from ..data.game_data import GAME_PROCESS_NAME

logger = logging.getLogger(__name__)


def get_game_processes(process_name: str = GAME_PROCESS_NAME) -> List[psutil.Process]:
    """Return psutil.Process objects whose name starts with process_name."""
    game_procs = []
    for proc in psutil.process_iter(['pid', 'name']):
        try:
            name = proc.info['name']
            if name and name.startswith(process_name):
                game_procs.append(proc)
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
    return game_procs


def stop_processes(processes: List[psutil.Process], timeout: float = 10) -> None:
    """Terminate processes, killing any still alive after timeout seconds."""
    for proc in processes:
        try:
            logger.info(f"Terminating {proc.info.get('name')} (pid {proc.pid})")
            proc.terminate()
        except psutil.NoSuchProcess:
            continue
    _, alive = psutil.wait_procs(processes, timeout=timeout)
    for proc in alive:
        try:
            logger.warning(f"Process {proc.pid} did not exit, killing it")
            proc.kill()
        except psutil.NoSuchProcess:
            continue
