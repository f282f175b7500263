import pytest

from acsetup.backend.core.exceptions import PreconditionError
from acsetup.backend.services import distribution_detection_service as dds
from acsetup.backend.services.distribution_detection_service import (
    DistributionDetectionService,
    find_executable,
    load_shell_aliases,
    package_binary,
    parse_os_release,
    resolve_distribution,
)


class TestParseOsRelease:
    """Test reading os-release files"""

    def test_quoted_and_unquoted_values(self, tmp_path):
        os_release = tmp_path / "os-release"
        os_release.write_text(
            'NAME="Linux Mint"\n'
            "ID=linuxmint\n"
            "ID_LIKE='ubuntu debian'\n"
            "# a comment\n"
            "\n"
            "VERSION_ID=\"21.3\"\n"
        )
        fields = parse_os_release(os_release)
        assert fields["NAME"] == "Linux Mint"
        assert fields["ID"] == "linuxmint"
        assert fields["ID_LIKE"] == "ubuntu debian"
        assert fields["VERSION_ID"] == "21.3"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            parse_os_release(tmp_path / "missing")


class TestResolveDistribution:
    """Test mapping distributions to package managers"""

    @pytest.mark.parametrize(
        "distro_id,family,install_command",
        [
            ("fedora", "dnf", "dnf install"),
            ("nobara", "dnf", "dnf install"),
            ("ultramarine", "dnf", "dnf install"),
            ("debian", "apt", "apt install"),
            ("ubuntu", "apt", "apt install"),
            ("linuxmint", "apt", "apt install"),
            ("pop", "apt", "apt install"),
            ("arch", "arch", "pacman -S"),
            ("endeavouros", "arch", "pacman -S"),
            ("steamos", "arch", "pacman -S"),
            ("cachyos", "arch", "pacman -S"),
            ("opensuse-tumbleweed", "opensuse", "zypper install"),
            ("slackware", "slackware", "slackpkg install or sboinstall"),
            ("salix", "slackware", "slackpkg install or sboinstall"),
            ("gentoo", "gentoo", "emerge"),
            ("void", "void", "xbps-install -S"),
        ],
    )
    def test_supported_ids(self, distro_id, family, install_command):
        info = resolve_distribution({"ID": distro_id, "NAME": distro_id.title()})
        assert info.family == family
        assert info.install_command == install_command
        assert info.id_like == "undefined"

    @pytest.mark.parametrize(
        "id_like,family",
        [
            ("fedora", "dnf"),
            ("ubuntu debian", "apt"),
            ("arch", "arch"),
            ("opensuse-tumbleweed", "opensuse"),
            ("slackware", "slackware"),
            ("gentoo", "gentoo"),
            ("void", "void"),
        ],
    )
    def test_id_like_fallback(self, id_like, family):
        info = resolve_distribution({"ID": "somederivative", "NAME": "Derivative", "ID_LIKE": id_like})
        assert info.family == family

    def test_ubuntu_without_id_like_uses_apt(self):
        info = resolve_distribution({"ID": "ubuntu", "NAME": "Ubuntu"})
        assert info.install_command == "apt install"
        assert info.required_packages == ("tar", "unzip", "glib2", "protontricks")

    def test_nobara_without_id_like_uses_dnf(self):
        info = resolve_distribution({"ID": "nobara", "NAME": "Nobara Linux"})
        assert info.install_command == "dnf install"

    def test_gentoo_uses_package_atoms(self):
        info = resolve_distribution({"ID": "gentoo", "NAME": "Gentoo"})
        assert "app-emulation/protontricks" in info.required_packages

    def test_void_packages_are_separate_names(self):
        info = resolve_distribution({"ID": "void", "NAME": "Void"})
        assert info.required_packages == ("tar", "unzip", "glib", "protontricks")
        assert all("," not in package for package in info.required_packages)

    def test_partial_id_does_not_match(self):
        # "deb" is a substring of "debian" but not a supported id
        with pytest.raises(PreconditionError):
            resolve_distribution({"ID": "deb", "NAME": "Deb"})

    def test_unsupported_distribution(self):
        with pytest.raises(PreconditionError) as excinfo:
            resolve_distribution({"ID": "haiku", "NAME": "Haiku", "ID_LIKE": "beos"})
        assert excinfo.value.exit_code == 1
        assert "Haiku is not currently supported." in excinfo.value.message

    @pytest.mark.parametrize("missing", ["ID", "NAME"])
    def test_required_fields(self, missing):
        fields = {"ID": "ubuntu", "NAME": "Ubuntu"}
        del fields[missing]
        with pytest.raises(PreconditionError):
            resolve_distribution(fields)


class TestPackageLookup:
    """Test required package executable lookup"""

    @pytest.mark.parametrize(
        "package,binary",
        [
            ("tar", "tar"),
            ("glib2", "gio"),
            ("glib", "gio"),
            ("infozip", "unzip"),
            ("app-arch/unzip", "unzip"),
            ("dev-libs/glib2", "gio"),
            ("app-emulation/protontricks", "protontricks"),
        ],
    )
    def test_package_binary(self, package, binary):
        assert package_binary(package) == binary

    def test_alias_takes_precedence(self, mocker):
        mocker.patch.object(dds.shutil, "which", return_value=None)
        aliases = {"protontricks": "flatpak run com.github.Matoking.protontricks"}
        assert find_executable("protontricks", aliases) == "flatpak run com.github.Matoking.protontricks"
        assert find_executable("tar", aliases) is None

    def test_path_lookup(self, mocker):
        mocker.patch.object(dds.shutil, "which", return_value="/usr/bin/tar")
        assert find_executable("tar") == "/usr/bin/tar"

    def test_load_shell_aliases(self, tmp_path):
        (tmp_path / ".bashrc").write_text(
            "export PATH=$PATH:~/bin\n"
            "alias protontricks='flatpak run com.github.Matoking.protontricks'\n"
            "alias ll=\"ls -l\"  # listing\n"
        )
        (tmp_path / ".bash_aliases").write_text("alias gio=/opt/glib/bin/gio\n")
        aliases = load_shell_aliases(tmp_path)
        assert aliases["protontricks"] == "flatpak run com.github.Matoking.protontricks"
        assert aliases["ll"] == "ls -l"
        assert aliases["gio"] == "/opt/glib/bin/gio"

    def test_no_alias_files(self, tmp_path):
        assert load_shell_aliases(tmp_path) == {}


class TestDetect:
    """Test the complete environment check"""

    @pytest.fixture
    def service(self, tmp_path, mocker):
        mocker.patch.object(dds, "is_root_user", return_value=False)
        os_release = tmp_path / "os-release"
        os_release.write_text('NAME="Ubuntu"\nID=ubuntu\nID_LIKE=debian\n')
        return DistributionDetectionService(os_release_path=os_release, home=tmp_path)

    def test_detect_success(self, service, mocker):
        mocker.patch.object(dds.shutil, "which", side_effect=lambda name: f"/usr/bin/{name}")
        info = service.detect()
        assert info.id == "ubuntu"
        assert info.family == "apt"

    def test_missing_package(self, service, mocker):
        mocker.patch.object(dds.shutil, "which", side_effect=lambda name: None if name == "gio" else f"/usr/bin/{name}")
        with pytest.raises(PreconditionError) as excinfo:
            service.detect()
        assert "gio is not installed" in excinfo.value.message
        assert "sudo apt install glib2" in excinfo.value.message

    def test_aliased_package_counts_as_installed(self, service, tmp_path, mocker):
        (tmp_path / ".bashrc").write_text("alias protontricks='flatpak run com.github.Matoking.protontricks'\n")
        mocker.patch.object(dds.shutil, "which", side_effect=lambda name: None if name == "protontricks" else f"/usr/bin/{name}")
        assert service.detect().family == "apt"

    def test_root_refused(self, service, mocker):
        mocker.patch.object(dds, "is_root_user", return_value=True)
        with pytest.raises(PreconditionError) as excinfo:
            service.detect()
        assert excinfo.value.message == "Please do not run as root."

    def test_unreadable_os_release(self, tmp_path, mocker):
        mocker.patch.object(dds, "is_root_user", return_value=False)
        service = DistributionDetectionService(os_release_path=tmp_path / "missing", home=tmp_path)
        with pytest.raises(PreconditionError):
            service.detect()
