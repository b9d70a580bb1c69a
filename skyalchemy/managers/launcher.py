import platform
import subprocess
import sys
from pathlib import Path

from skyalchemy import exceptions
from skyalchemy.constants import LaunchMode, ModOrganizerInfo
from skyalchemy.utils import withlogger


def running_under_wsl():
    """WSL kernels identify themselves in their release string"""
    return "microsoft" in platform.uname().release.lower()


def shortcut_uri(shortcut):
    """
    :param str shortcut: name of a ModOrganizer shortcut
    :return: e.g. 'moshortcut://:skyrim-alchemy'
    """
    return ModOrganizerInfo.shortcut_scheme + shortcut


@withlogger
class ModOrganizerLauncher:
    """
    Starts a ModOrganizer shortcut and waits for it to finish.
    ModOrganizer runs the shortcut's target (here, the game data
    export) inside its virtual file system, then exits.
    """

    def __init__(self, modorganizer_path, shortcut, mode=LaunchMode.auto):
        """
        :param str modorganizer_path: full path to ModOrganizer.exe
        :param str shortcut: name of the shortcut to run
        :param LaunchMode|str mode:
        """
        self.modorganizer_path = str(modorganizer_path)
        self.shortcut = shortcut
        self.mode = LaunchMode(mode)

    @classmethod
    def from_config(cls, config):
        """
        :param skyalchemy.managers.config.ConfigManager config:
        """
        return cls(config.modorganizer_path, config.shortcut,
                   config.launch_mode)

    @property
    def shortcut_uri(self):
        return shortcut_uri(self.shortcut)

    def resolve_mode(self):
        """
        :return: the concrete mode to use; never LaunchMode.auto
        """
        if self.mode is not LaunchMode.auto:
            return self.mode

        if sys.platform == "win32":
            return LaunchMode.direct
        if running_under_wsl():
            return LaunchMode.powershell
        return LaunchMode.direct

    def build_command(self, mode=None):
        """
        :param LaunchMode mode: defaults to resolve_mode()
        :return: argument list for subprocess
        """
        if mode is None:
            mode = self.resolve_mode()

        if mode is LaunchMode.powershell:
            return [ModOrganizerInfo.powershell, "-command",
                    ModOrganizerInfo.start_process.format(
                        path=self.modorganizer_path,
                        argument=self.shortcut_uri)]

        return [self.modorganizer_path, self.shortcut_uri]

    def launch(self):
        """
        Run the shortcut, blocking until ModOrganizer exits.

        :raises ExecutableNotFoundError: in direct mode, when
            ModOrganizer is not at the configured path
        :raises ProcessFailedError: when the process exits with a
            non-zero status
        """
        mode = self.resolve_mode()
        command = self.build_command(mode)

        kwargs = {}
        if mode is LaunchMode.direct:
            if not Path(self.modorganizer_path).is_file():
                raise exceptions.ExecutableNotFoundError(
                    self.modorganizer_path)
            # only defined on Windows
            kwargs["creationflags"] = getattr(subprocess,
                                              "CREATE_NO_WINDOW", 0)

        self.LOGGER.info("Launching ModOrganizer shortcut '%s' (%s mode)",
                         self.shortcut, mode.value)
        self.LOGGER << "Command: {}".format(command)

        try:
            result = subprocess.run(command, **kwargs)
        except FileNotFoundError as e:
            # e.g. powershell.exe is not on the PATH
            raise exceptions.ExecutableNotFoundError(command[0]) from e

        if result.returncode != 0:
            raise exceptions.ProcessFailedError(command, result.returncode)

        self.LOGGER << "ModOrganizer exited normally"
