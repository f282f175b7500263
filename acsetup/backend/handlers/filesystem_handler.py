"""
FileSystemHandler module for managing file system operations.
This module handles downloads, archive extraction, copies and deletions.

Failures are not swallowed: OSError and DownloadError propagate so the
frontend can stop the run.
"""

import os
import shutil
import logging
from pathlib import Path

import requests

from ..core.exceptions import DownloadError

# Initialize logger for the module
logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = 300
DOWNLOAD_CHUNK_SIZE = 8192


class FileSystemHandler:
    def __init__(self, runner):
        self.runner = runner
        self.logger = logging.getLogger(__name__)

    # --- Network -----------------------------------------------------------
    def download_file(self, url: str, destination_path: Path) -> Path:
        """Download url to destination_path, replacing any existing file."""
        self.logger.info(f"Downloading {url} to {destination_path}...")
        destination_path = Path(destination_path)
        destination_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with requests.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT) as r:
                r.raise_for_status()
                with open(destination_path, 'wb') as f:
                    for chunk in r.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        f.write(chunk)
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"Download failed: {e}")
            # Clean up potentially incomplete file
            if destination_path.exists():
                destination_path.unlink()
            raise DownloadError(url, str(e))
        self.logger.info("Download complete.")
        return destination_path

    # --- Archives (external tools, guarded) ----------------------------------
    def extract_tar_gz(self, archive: Path, destination: Path) -> None:
        destination.mkdir(parents=True, exist_ok=True)
        self.runner.check("tar", "-xzf", archive, "-C", destination)

    def extract_zip(self, archive: Path, destination: Path, overwrite: bool = False) -> None:
        destination.mkdir(parents=True, exist_ok=True)
        flags = "-qo" if overwrite else "-q"
        self.runner.check("unzip", flags, archive, "-d", destination)

    def move_to_trash(self, path: Path) -> None:
        self.runner.check("gio", "trash", path)

    # --- Local file operations ------------------------------------------------
    @staticmethod
    def copy_directory(source: Path, destination: Path) -> None:
        """Copy source to destination, merging into an existing directory."""
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
        logger.debug(f"Copied directory {source} to {destination}")

    @staticmethod
    def copy_directory_contents(source: Path, destination: Path) -> None:
        """Copy every entry of source into destination, overwriting files."""
        destination.mkdir(parents=True, exist_ok=True)
        for entry in source.iterdir():
            target = destination / entry.name
            if entry.is_dir() and not entry.is_symlink():
                shutil.copytree(entry, target, symlinks=True, dirs_exist_ok=True)
            else:
                if target.is_symlink() or target.is_file():
                    target.unlink()
                shutil.copy2(entry, target, follow_symlinks=False)
        logger.debug(f"Copied contents of {source} into {destination}")

    @staticmethod
    def delete_file(path: Path) -> None:
        path.unlink()
        logger.debug(f"Deleted file {path}")

    @staticmethod
    def delete_directory(path: Path) -> None:
        """Recursively delete path if it exists."""
        if path.is_symlink():
            path.unlink()
        elif path.exists():
            shutil.rmtree(path)
        logger.debug(f"Deleted directory {path}")

    @staticmethod
    def move_file(src: Path, dst: Path, overwrite: bool = True) -> bool:
        """Move a single file; returns False when skipped because dst exists."""
        if dst.exists() and not overwrite:
            logger.debug(f"Move skipped: destination exists - {dst}")
            return False
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(src), str(dst))
        logger.debug(f"Moved {src} to {dst}")
        return True

    @staticmethod
    def force_symlink(target: Path, link: Path) -> None:
        """Create link pointing at target, replacing whatever is at link."""
        link.parent.mkdir(parents=True, exist_ok=True)
        if link.is_symlink() or link.is_file():
            link.unlink()
        os.symlink(target, link)
        logger.debug(f"Linked {link} -> {target}")
