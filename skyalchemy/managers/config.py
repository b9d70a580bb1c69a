from pathlib import Path

import appdirs

from skyalchemy import exceptions
from skyalchemy.managers.base import BaseConfigManager
from skyalchemy.utils import withlogger
from skyalchemy.utils import fsutils
from skyalchemy.constants import (EnvVars, LaunchMode, keystrings, APPNAME,
                                  MAIN_CONFIG, DEFAULT_MO_PATH,
                                  DEFAULT_SHORTCUT, DEFAULT_LANGUAGE)

# for convenience and quicker lookup
_SECTION_GENERAL = keystrings.Section.GENERAL
_SECTION_LAUNCHER = keystrings.Section.LAUNCHER
_SECTION_GAME = keystrings.Section.GAME

_KEY_LANG     = keystrings.INI.LANGUAGE
_KEY_MOPATH   = keystrings.INI.MO_PATH
_KEY_SHORTCUT = keystrings.INI.SHORTCUT
_KEY_MODE     = keystrings.INI.LAUNCH_MODE
_KEY_GAMEDIR  = keystrings.INI.GAME_PATH
_KEY_LOCALDIR = keystrings.INI.LOCAL_PATH

## config file schema (and default values) ##
_DEFAULT_CONFIG_={
    _SECTION_GENERAL: {
        _KEY_LANG: DEFAULT_LANGUAGE,
    },
    _SECTION_LAUNCHER: {
        _KEY_MOPATH: DEFAULT_MO_PATH,
        _KEY_SHORTCUT: DEFAULT_SHORTCUT,
        _KEY_MODE: LaunchMode.auto.value,
    },
    _SECTION_GAME: {
        _KEY_GAMEDIR: "",
        _KEY_LOCALDIR: "", # %LOCALAPPDATA%/Skyrim Special Edition
    }
}


@withlogger
class ConfigManager(BaseConfigManager):

    def __init__(self, config_file=None, *args, **kwargs):
        """

        :param str config_file: path of the INI file to use; defaults
            to skyalchemy.ini in the app's config directory
        """

        self.LOGGER << "Initializing ConfigManager"

        super().__init__(
            template = _DEFAULT_CONFIG_,
            config_file = config_file,
            environ_vars = [e.value for e in EnvVars],
            *args, **kwargs)

        if config_file is None:
            self.config_file = fsutils.join_path(self.config_dir,
                                                 MAIN_CONFIG)

        # list of (section, key) tuples caught from MissingConfig...Errors
        self.missing_keys = []

        # read config file, make sure all required data is present or at default
        self.ensure_default_setup()

    @property
    def config_dir(self):
        """
        The directory named by $SKA_CONFIG_DIR if it was set when the
        manager was created, otherwise the platform's per-user config
        directory for the app.
        """
        return (self.getenv(EnvVars.CONFIG_DIR.value)
                or appdirs.user_config_dir(APPNAME))

    def __getitem__(self, config_var):
        """
        Use dict-access to get the value of any of items in this config
        instance by key name. E.g:

        >>> config['shortcut']
        'skyrim-alchemy'

        :param str config_var:
        :return: the value or None if the value/key cannot be found
        """

        # the keys are unique across sections
        for s in self.current_values.values():
            if config_var in s:
                return s[config_var]

        return None

    ##=============================================
    ## Setup and Sanity Checks
    ##=============================================

    def ensure_default_setup(self):
        """
        Make sure the config file exists and holds every key of the
        schema.

            * If the file does not exist, create it (and its directory)
              with default values.

            * Read every known key from the file into current_values.

            * Track any missing sections/keys; default values are
              inserted into the file for these and it is written back.
              Values that are present but invalid are left alone so the
              user can correct them by hand.
        """

        ## check that main config file exists ##
        if not Path(self.config_file).exists():
            self.LOGGER.info("Creating default configuration file at %s",
                             self.config_file)
            self.create_config_file()

        ## Load settings from main config file ##
        config = self.read_config()

        for section, keys in self.template.items():
            for key in keys:
                try:
                    self.load_value_from(config, section, key)
                except (exceptions.MissingConfigKeyError,
                        exceptions.MissingConfigSectionError) as e:
                    self.missing_keys.append((e.section, key))
                    self.LOGGER << "setting "+key+" to default value"

        ## and finally, fill in any blank spots in the config.
        if self.missing_keys:
            for s, k in self.missing_keys:

                # check if the section itself is missing
                if s not in config:
                    config[s] = {}

                config[s][k] = self.current_values[s][k]

            self.LOGGER.info("Adding %d missing keys to %s",
                             len(self.missing_keys), self.config_file)
            self.write_config(config)

    ##=============================================
    ## Typed access
    ##=============================================

    @property
    def language(self):
        return (self.get_value(_SECTION_GENERAL, _KEY_LANG)
                or self.default_value(_SECTION_GENERAL, _KEY_LANG))

    @property
    def modorganizer_path(self):
        value = self.get_value(_SECTION_LAUNCHER, _KEY_MOPATH)
        if not value:
            raise exceptions.ConfigValueUnsetError(_KEY_MOPATH,
                                                   _SECTION_LAUNCHER)
        return value

    @property
    def shortcut(self):
        value = self.get_value(_SECTION_LAUNCHER, _KEY_SHORTCUT)
        if not value:
            raise exceptions.ConfigValueUnsetError(_KEY_SHORTCUT,
                                                   _SECTION_LAUNCHER)
        return value

    @property
    def launch_mode(self):
        """:rtype: LaunchMode"""
        value = self.get_value(_SECTION_LAUNCHER, _KEY_MODE)
        try:
            return LaunchMode(value.strip().lower()
                              or self.default_value(_SECTION_LAUNCHER,
                                                    _KEY_MODE))
        except ValueError:
            raise exceptions.InvalidConfigValueError(_KEY_MODE,
                                                     _SECTION_LAUNCHER,
                                                     value) from None

    @property
    def game_path(self):
        """:return: Path, or None if unset"""
        return self._get_path(_SECTION_GAME, _KEY_GAMEDIR)

    @property
    def local_path(self):
        """:return: Path, or None if unset"""
        return self._get_path(_SECTION_GAME, _KEY_LOCALDIR)

    def _get_path(self, section, key):
        value = self.get_value(section, key)
        if not value:
            return None
        return Path(value).expanduser()

    def save_game_paths(self, game_path=None, local_path=None):
        """Store whichever of the paths are given in the config file"""
        for key, value in ((_KEY_GAMEDIR, game_path),
                           (_KEY_LOCALDIR, local_path)):
            if value:
                self.LOGGER.info("Saving %s = %s to %s", key, value,
                                 self.config_file)
                self.update_value(_SECTION_GAME, key, str(value))
