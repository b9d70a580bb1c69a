class Error(Exception):
    """Base class for all app-specific errors"""

class GeneralError(Error):
    """
    Generic exception that accepts an explanatory string.
    """
    def __init__(self, message:str):
        super().__init__(message)
        self.msg = message
    def __str__(self):
        return self.msg

#----------------------------
class ConfigError(Error):
    """Base class for configuration-related exceptions."""
    def __init__(self, key, section):
        super().__init__(key, section)
        self.section = section
        self.key = key

class InvalidConfigSectionError(GeneralError):
    def __init__(self, section):
        self.section = section
        super().__init__(f"Invalid section header '{section}'")

class ConfigValueUnsetError(ConfigError):
    """The given key and section exist, but do not contain a valid value"""
    def __str__(self):
        return f"Configuration parameter '{self.key}' in section '{self.section}' is unset."

class MissingConfigSectionError(GeneralError):
    def __init__(self, section):
        self.section = section
        super().__init__(f"Section header '{section}' not found")

class MissingConfigKeyError(ConfigError):
    """Based on the config-file schema, the application has determined that a key that should be in the config file is not present."""
    def __str__(self):
        return f"Configuration file missing key '{self.key}' from section '{self.section}'."

class InvalidConfigKeyError(ConfigError):
    """
    A key was requested from the configuration file that is not present in the schema
    """
    def __str__(self):
        return f"'{self.key}' is not a valid configuration key for section '{self.section}'."

class InvalidConfigValueError(ConfigError):
    """The key exists but its value is not one the application accepts."""
    def __init__(self, key, section, value):
        super().__init__(key, section)
        self.value = value

    def __str__(self):
        return f"Invalid value {self.value!r} for configuration parameter '{self.key}' in section '{self.section}'."

#---------------------------
class LaunchError(GeneralError):
    """Base class for failures while starting an external program."""

class ExecutableNotFoundError(LaunchError):
    """The program to launch does not exist at the configured path."""
    def __init__(self, path):
        self.path = path
        super().__init__(f"Executable not found: '{path}'")

class ProcessFailedError(LaunchError):
    """
    The launched program ran but exited with a non-zero status. The
    status is kept so it can become our own exit status.
    """
    def __init__(self, command, returncode):
        self.command = command
        self.returncode = returncode
        super().__init__(
            f"Command {command!r} exited with status {returncode}")

#---------------------------
class FileAccessError(GeneralError):
    """
    Generic error for issues encountered when doing filesystem-related operations. pass the filename as the first argument, and use '{file}' in the message arg to refer to it.
    """
    def __init__(self, file, message='{file}'):
        self.file = file
        super().__init__(message.format(file=file))

#---------------------------
class LoadOrderError(GeneralError):
    """Raised when the active load order cannot be determined."""

class PluginParseError(GeneralError):
    """
    Raised when a plugin file contains data that cannot be parsed.
    """
    def __init__(self, plugin, message):
        self.plugin = plugin
        super().__init__(f"{plugin}: {message}")

class StringsTableError(GeneralError):
    """Raised when a strings file is malformed."""

class BsaError(GeneralError):
    """Raised when a .bsa archive is malformed or unsupported."""

class GameDataError(GeneralError):
    """Raised when an exported game data file cannot be read."""

#------------------------------
class UnknownFormIdError(Error):
    """A global form id was referenced that is not in the game data."""
    def __init__(self, form_id):
        super().__init__(form_id)
        self.form_id = form_id

    def __str__(self):
        return f"the form ID {self.form_id} is unknown"

class IngredientError(Error):
    """Base class for ingredients with invalid data."""
    def __init__(self, ingredient):
        super().__init__(ingredient)
        self.ingredient = ingredient

class ReferencesUnknownMagicEffectsError(IngredientError):
    def __init__(self, ingredient, unknown):
        """
        :param ingredient: the offending Ingredient
        :param list[UnknownFormIdError] unknown:
        """
        super().__init__(ingredient)
        self.unknown = unknown

    def __str__(self):
        return "ingredient {} references unknown magic effects: {}".format(
            self.ingredient.display_name,
            ", ".join(str(u) for u in self.unknown))

class DuplicateEffectsError(IngredientError):
    def __str__(self):
        return "ingredient {} lists the same magic effect more than " \
               "once".format(self.ingredient.display_name)

#------------------------------
class PotionCraftError(Error):
    """Raised when a set of ingredients cannot be combined into a potion."""
    message = "cannot craft potion"

    def __init__(self, ingredient=None):
        super().__init__(ingredient)
        self.ingredient = ingredient

    def __str__(self):
        return self.message

class DuplicateIngredientError(PotionCraftError):
    message = "cannot use the same ingredient more than once in a potion"

class InvalidIngredientError(PotionCraftError):
    message = "ingredient has invalid data (duplicate effects)"

class NotEnoughIngredientsError(PotionCraftError):
    message = "must supply at least two ingredients"

class TooManyIngredientsError(PotionCraftError):
    message = "cannot use more than three ingredients"

class NoSharedEffectsError(PotionCraftError):
    message = "none of the ingredients have a shared effect"
