from .enums import *


## configuration-related strings
APPNAME = "skyalchemy" # mainly for use w/ appdirs
MAIN_CONFIG = "{}.ini".format(APPNAME)

## defaults written to a fresh config file; these are the values the
## launcher uses unless the user edits them
DEFAULT_MO_PATH = "F:/Skyrim Elysium Remastered/ModOrganizer.exe"
DEFAULT_SHORTCUT = "skyrim-alchemy"
DEFAULT_LANGUAGE = "english"


class ModOrganizerInfo:
    """How ModOrganizer expects to be driven from outside"""

    shortcut_scheme = "moshortcut://:"

    powershell = "powershell.exe"

    # Start-Process waits for the child and keeps it out of a new window
    start_process = ('Start-Process -Wait -NoNewWindow '
                     '-FilePath "{path}" -ArgumentList "{argument}"')


class SkyrimGameInfo:
    """Contains information specific to Skyrim Special Edition
    (filenames, ids, etc) that we may need to know"""

    data_dir = "Data"

    # name of the folder within %LOCALAPPDATA% holding plugins.txt
    local_appdata_dir = "Skyrim Special Edition"
    plugins_file = "plugins.txt"

    # lists the Creation Club plugins that ship with the game
    ccc_file = "Skyrim.ccc"

    # always active, always first, never listed in plugins.txt
    implicit_masters = ("Skyrim.esm", "Update.esm", "Dawnguard.esm",
                        "HearthFires.esm", "Dragonborn.esm")

    # strings for the base game and its DLC are packed together
    interface_archive = "Skyrim - Interface.bsa"
    interface_plugins = ("skyrim", "update", "dawnguard",
                         "hearthfires", "dragonborn")

    strings_dir = "strings"


class AlchemyInfo:
    """Limits and factors used when mixing potions.

    See https://en.uesp.net/wiki/Skyrim:Alchemy_Effects
    """

    min_ingredients = 2
    max_ingredients = 3
    max_effects = 6

    # player alchemy skill and perks are not read, so this is the
    # fixed base factor
    effect_power_factor = 6.0

    default_suggestions = 20

    missing_effect_name = "<MISSING_EFFECT_NAME>"
    missing_ingredient_name = "<MISSING_INGREDIENT_NAME>"
