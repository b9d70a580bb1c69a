"""
Contains classes that are containers for various strings used as keys
to refer to configuration entries throughout the project. These
Key Strings should be used instead of raw strings in all instances in
order to maintain expandability and interoperability.
"""

__all__=["Section", "INI"]

##=============================================
## Metaclass
##=============================================

class Iternum(type):
    """
    Using this as a metaclass, one can iterate over the public class-level fields
    of a non-instantiated subclass (ie the type object itself). See INI below for
    an example
    """
    def __iter__(cls):
        yield from (v for k,v in cls.__dict__.items() if not k.startswith('_'))

    def __contains__(cls, val):
        return val in [v for k,v in cls.__dict__.items() if not k.startswith('_')]

##=============================================
## Implementations
##=============================================

class Section(metaclass=Iternum):
    """
    Configuration Headings in the main INI file.

    DEFAULT and GENERAL are the same thing.
    """
    DEFAULT = "General"
    GENERAL = DEFAULT

    LAUNCHER = "Launcher"
    """How ModOrganizer gets started"""

    GAME = "Game"
    """Where the game and its local data live"""


class INI(metaclass=Iternum):
    """
    Key Strings for referencing entries under an INI Section.

    Thanks to the Iternum metaclass, the public fields in this class
    can be iterated over without having to instantiate the class,
    simply by doing something like:

        >>> for f in INI:
        >>>     print(f)
    """
    ## General
    LANGUAGE = "strings_language"
    """language suffix of the strings files to read"""

    ## Launcher
    MO_PATH = "modorganizer_path"
    """full path to ModOrganizer.exe"""

    SHORTCUT = "shortcut"
    """name of the ModOrganizer shortcut to run"""

    LAUNCH_MODE = "launch_mode"
    """one of auto, direct, powershell"""

    ## Game
    GAME_PATH = "game_path"
    """directory containing SkyrimSE.exe"""

    LOCAL_PATH = "local_path"
    """directory containing plugins.txt"""
