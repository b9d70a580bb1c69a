from configparser import ConfigParser as _parser, Error as _ParserError
import os
from copy import deepcopy

from skyalchemy.utils import fsutils
from skyalchemy import exceptions


class BaseConfigManager:
    """
    Mirrors an INI file whose sections and keys are fixed by a template.
    Values are held in `current_values` as plain strings; subclasses
    convert them.
    """

    def __init__(self,
                 template,
                 environ_vars=(),
                 config_file=None,
                 *args, **kwargs):
        """

        :param dict[str, dict[str, str]] template: section -> key ->
            default value. Only keys present here can be read or set.
        :param environ_vars: names of the environment variables the
            manager may consult; they are read once, here
        :param config_file: path of the INI file; may be set later
            through the `config_file` property
        """

        # noinspection PyArgumentList
        super().__init__(*args, **kwargs)

        self._cfile = None if config_file is None else str(config_file)

        self.template = template

        # what the file holds, once read; defaults until then
        self.current_values = deepcopy(template) # type: dict [str, dict [str, str]]

        self._environment = {k: os.getenv(k, "") for k in environ_vars}

    ##=============================================
    ## Properties
    ##=============================================

    @property
    def config_file(self):
        return self._cfile

    @config_file.setter
    def config_file(self, file):
        self._cfile = str(file)

    def getenv(self, varname):
        """
        :return: the value `varname` had when the manager was created
            ("" if it was unset), or None if `varname` was not one of
            the `environ_vars`
        """
        return self._environment.get(varname)

    ##=============================================
    ## Config file
    ##=============================================

    def create_config_file(self):
        """Write the template's defaults out as a new config file"""

        config = _parser(interpolation=None)
        config.read_dict(self.template)
        self.write_config(config)

    def read_config(self):
        """
        :return: a ConfigParser loaded from the config file
        :raises FileAccessError: if the file is not valid INI
        """

        config = _parser(interpolation=None)
        try:
            config.read(self.config_file, encoding="utf-8")
        except _ParserError as e:
            raise exceptions.FileAccessError(
                self.config_file,
                "Could not parse configuration file '{file}': "
                + str(e)) from e
        return config

    def write_config(self, parser):
        """Replace the config file with the contents of `parser`"""

        with fsutils.open_atomic(self.config_file) as cfile:
            parser.write(cfile)

    ##=============================================
    ## Getting values
    ##=============================================

    def get_value(self, section, key):
        """
        :raises InvalidConfigSectionError, InvalidConfigKeyError: if
            the template has no such section or key
        """

        try:
            s = self.current_values[section]
        except KeyError:
            raise exceptions.InvalidConfigSectionError(section)

        try:
            return s[key]
        except KeyError:
            raise exceptions.InvalidConfigKeyError(key, section)

    def default_value(self, section, key):
        return self.template[section][key]

    def load_value_from(self, parser, section, key):
        """
        Copy one value from `parser` into current_values.

        :param _parser parser:
        :raises MissingConfigSectionError, MissingConfigKeyError: if
            the parsed file lacks the section or key
        """

        if section not in parser:
            raise exceptions.MissingConfigSectionError(section)
        if key not in parser[section]:
            raise exceptions.MissingConfigKeyError(key, section)

        self._set_value(section, key, parser[section][key])

    ##=============================================
    ## Changing values
    ##=============================================

    def _set_value(self, section, key, value):
        try:
            s = self.current_values[section]
        except KeyError:
            raise exceptions.InvalidConfigSectionError(section)

        if key not in s:
            raise exceptions.InvalidConfigKeyError(key, section)
        s[key] = value

    def update_value(self, section, key, value):
        """
        Set a value and save it to the config file straight away. Other
        entries in the file are written back as they were read.

        :param str section:
        :param str key:
        :param str value:
        """

        # validate against the template before touching the file
        self._set_value(section, key, value)

        conf = self.read_config()
        if section not in conf:
            conf[section] = {}
        conf[section][key] = value

        self.write_config(conf)
