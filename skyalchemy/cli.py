"""
Command line interface.

    skyalchemy [-v|-vv] [--log-file FILE] [--config FILE] COMMAND ...

Commands:
    launch              run the configured ModOrganizer shortcut
    export-game-data    read the load order and write ingredients and
                        magic effects to a JSON file
    suggest-potions     print the most valuable potions that can be made
                        from an exported game data file
"""
from argparse import ArgumentParser, ArgumentTypeError

from skyalchemy import exceptions, skylog
from skyalchemy.constants import APPNAME, AlchemyInfo

_logger = skylog.newLogger(__name__)


def _positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise ArgumentTypeError("{!r} is not an integer".format(value))
    if number < 1:
        raise ArgumentTypeError("must be at least 1, got {}".format(number))
    return number


def build_parser():
    parser = ArgumentParser(
        prog=APPNAME,
        description="Export ingredient data from a Skyrim Special Edition "
                    "load order and find the most valuable potions.")

    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="log more detail; repeat for even more (-vv)")
    parser.add_argument(
        "--log-file", metavar="FILE",
        help="also write the log to FILE (overwritten)")
    parser.add_argument(
        "--config", metavar="FILE",
        help="configuration file to use instead of the default")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    ## launch ##
    launch = subparsers.add_parser(
        "launch",
        help="run the configured ModOrganizer shortcut and wait for it")
    launch.set_defaults(func=cmd_launch)

    ## export-game-data ##
    export = subparsers.add_parser(
        "export-game-data",
        help="write the load order's ingredients and magic effects to a "
             "JSON file")
    export.add_argument(
        "--game-path", metavar="DIR",
        help="Skyrim installation directory (the one holding "
             "SkyrimSE.exe); defaults to the configured path")
    export.add_argument(
        "--local-path", metavar="DIR",
        help="directory holding plugins.txt; defaults to "
             "%%LOCALAPPDATA%%/Skyrim Special Edition")
    export.add_argument(
        "--language", metavar="LANG",
        help="language of the strings files to read (e.g. english)")
    export.add_argument(
        "--save-paths", action="store_true",
        help="remember --game-path and --local-path in the configuration "
             "file")
    export.add_argument(
        "export_path", metavar="EXPORT_PATH",
        help="file to write the game data to")
    export.set_defaults(func=cmd_export_game_data)

    ## suggest-potions ##
    suggest = subparsers.add_parser(
        "suggest-potions",
        help="print the most valuable potions for some exported game data")
    lists = suggest.add_mutually_exclusive_group()
    lists.add_argument(
        "--ingredients-blacklist-path", metavar="FILE",
        help="file of ingredient names (one per line) not to use")
    lists.add_argument(
        "--ingredients-whitelist-path", metavar="FILE",
        help="file of ingredient names (one per line); only these are "
             "used")
    suggest.add_argument(
        "--limit", type=_positive_int,
        default=AlchemyInfo.default_suggestions, metavar="N",
        help="number of potions to print (default: %(default)s)")
    suggest.add_argument(
        "data_path", metavar="DATA_PATH",
        help="file written by export-game-data")
    suggest.set_defaults(func=cmd_suggest_potions)

    return parser


##=============================================
## Commands
##=============================================

def _config(args):
    from skyalchemy.managers.config import ConfigManager
    return ConfigManager(args.config)


def cmd_launch(args):
    """
    Takes no options of its own. The executable, shortcut and launch
    mode all come from the configuration file, so --config and
    $SKA_CONFIG_DIR (which pick that file) are what change what runs.
    """
    from skyalchemy.managers.launcher import ModOrganizerLauncher

    ModOrganizerLauncher.from_config(_config(args)).launch()
    return 0


def cmd_export_game_data(args):
    from skyalchemy.managers.exporter import parse_and_export_game_data

    game_path = args.game_path
    local_path = args.local_path
    language = args.language

    if game_path is None or language is None or args.save_paths:
        config = _config(args)
        if args.save_paths:
            config.save_game_paths(game_path, local_path)
        game_path = game_path or config.game_path
        local_path = local_path or config.local_path
        language = language or config.language

    if not game_path:
        raise exceptions.GeneralError(
            "No game path given; pass --game-path or set it in the "
            "configuration file")

    parse_and_export_game_data(game_path, args.export_path,
                               local_path=local_path, language=language)
    return 0


def cmd_suggest_potions(args):
    from skyalchemy.managers.alchemist import suggest_potions

    suggest_potions(args.data_path,
                    blacklist_path=args.ingredients_blacklist_path,
                    whitelist_path=args.ingredients_whitelist_path,
                    limit=args.limit)
    return 0


def main(argv=None):
    """
    :param list[str] argv: arguments, without the program name;
        defaults to sys.argv[1:]
    :return: exit status
    """
    parser = build_parser()
    # exits with status 2 on bad arguments
    args = parser.parse_args(argv)

    skylog.setupLogListener(skylog.level_for_verbosity(args.verbose),
                            args.log_file)
    try:
        return args.func(args)
    except exceptions.ProcessFailedError as e:
        _logger.error(str(e))
        return e.returncode
    except exceptions.Error as e:
        _logger.error(str(e))
        _logger.debug("Traceback:", exc_info=True)
        return 1
    finally:
        skylog.stop_listener()
