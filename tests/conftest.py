import sys
from pathlib import Path

import pytest

# Add the project root directory to sys.path so we can import the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from acsetup.backend.core.setup_steps import SetupToolkit
from acsetup.backend.handlers.config_handler import ConfigHandler
from acsetup.backend.handlers.filesystem_handler import FileSystemHandler
from acsetup.backend.models.configuration import (
    DistributionInfo,
    SetupContext,
    SteamInstallation,
    STEAM_NATIVE,
)


@pytest.fixture(autouse=True)
def reset_config_handler():
    """ConfigHandler is a singleton; give every test a fresh one"""
    ConfigHandler.reset()
    yield
    ConfigHandler.reset()


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    """Point HOME and the XDG directories at a temporary directory"""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    return home


@pytest.fixture
def distribution():
    return DistributionInfo(
        id="ubuntu",
        name="Ubuntu",
        family="apt",
        install_command="apt install",
        required_packages=("tar", "unzip", "glib2", "protontricks"),
    )


@pytest.fixture
def setup_context(tmp_path, distribution):
    """A SetupContext whose game directory exists inside tmp_path"""
    steam_root = tmp_path / "Steam"
    game_dir = steam_root / "steamapps" / "common" / "assettocorsa"
    game_dir.mkdir(parents=True)
    return SetupContext(
        distribution=distribution,
        steam=SteamInstallation(STEAM_NATIVE, steam_root),
        game_dir=game_dir,
        desktop_entry=tmp_path / "applications" / "Assetto Corsa.desktop",
        mimeapps_list=tmp_path / "config" / "mimeapps.list",
        work_dir=tmp_path / "work" / "temp",
        backup_dir=tmp_path / "work" / "ac_configs",
    )


@pytest.fixture
def mock_toolkit(mocker):
    """Toolkit where every handler is a mock and every question gets 'yes'"""
    menu = mocker.Mock()
    menu.ask.return_value = True
    return SetupToolkit(
        menu=menu,
        runner=mocker.Mock(),
        filesystem=mocker.Mock(),
        protontricks=mocker.Mock(),
        shortcuts=mocker.Mock(),
    )


@pytest.fixture
def fs_toolkit(mocker):
    """Toolkit with a real FileSystemHandler (external commands mocked)"""
    menu = mocker.Mock()
    menu.ask.return_value = True
    runner = mocker.Mock()
    return SetupToolkit(
        menu=menu,
        runner=runner,
        filesystem=FileSystemHandler(runner),
        protontricks=mocker.Mock(),
        shortcuts=mocker.Mock(),
    )
