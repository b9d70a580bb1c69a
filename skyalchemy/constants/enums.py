from enum import Enum, IntFlag

__all__=["EnvVars", "LaunchMode", "RecordFlag", "PluginFlag", "MagicEffectFlag", "PotionType"]

##=============================================
## Str-enums
##=============================================

class EnvVars(str, Enum):
    CONFIG_DIR = "SKA_CONFIG_DIR"
    LOCAL_APPDATA = "LOCALAPPDATA"

class LaunchMode(str, Enum):
    """How ModOrganizer is started.

    direct runs the executable; powershell goes through
    ``Start-Process`` (needed when running from WSL); auto picks one
    based on the current platform.
    """
    auto = "auto"
    direct = "direct"
    powershell = "powershell"

##=============================================
## Flags
##=============================================

class RecordFlag(IntFlag):
    """Flags from the header of any record"""
    COMPRESSED = 0x00040000

class PluginFlag(IntFlag):
    """Flags from the header of the TES4 record"""
    MASTER = 0x00000001
    LOCALIZED = 0x00000080
    LIGHT_MASTER = 0x00000200

class MagicEffectFlag(IntFlag):
    """
    The subset of MGEF DATA flags that affect alchemy.

    See https://en.uesp.net/wiki/Skyrim_Mod:Mod_File_Format/MGEF
    """
    HOSTILE = 0x00000001
    NO_DURATION = 0x00000200
    NO_MAGNITUDE = 0x00000400
    POWER_AFFECTS_MAGNITUDE = 0x00200000
    POWER_AFFECTS_DURATION = 0x00400000

##=============================================
## "Plain" enum subclasses
##=============================================

class PotionType(Enum):
    Potion = "Potion"
    Poison = "Poison"

    def __str__(self):
        return self.value
