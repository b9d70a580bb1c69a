import sys

from skyalchemy import exceptions
from skyalchemy.constants import AlchemyInfo
from skyalchemy.skylog import newLogger
from skyalchemy.types import GameData, PotionsList
from skyalchemy.utils.fsutils import read_lines

_logger = newLogger(__name__)


def _check_names(game_data, names, list_name):
    known = {i.name for i in game_data.ingredients.values()}
    for name in sorted(names - known):
        _logger.warning("%s ingredient '%s' not found in game data",
                        list_name, name)


def select_ingredients(game_data, blacklist=None, whitelist=None):
    """
    Choose the ingredients to mix.

    :param GameData game_data:
    :param set[str] blacklist: names of ingredients to leave out
    :param set[str] whitelist: names of the only ingredients to use
    :return: list of Ingredients
    """
    if blacklist is not None and whitelist is not None:
        raise exceptions.GeneralError(
            "Only one of blacklist and whitelist may be given")

    ingredients = list(game_data.ingredients.values())

    if whitelist is not None:
        _check_names(game_data, whitelist, "Whitelisted")
        ingredients = [i for i in ingredients if i.name in whitelist]
    elif blacklist is not None:
        _check_names(game_data, blacklist, "Blacklisted")
        ingredients = [i for i in ingredients if i.name not in blacklist]

    _logger.debug("Mixing %d of %d ingredients", len(ingredients),
                  len(game_data.ingredients))
    return ingredients


def suggest_potions(data_path, blacklist_path=None, whitelist_path=None,
                    limit=AlchemyInfo.default_suggestions, out=None):
    """
    Print the `limit` most valuable potions that can be made from the
    ingredients in the exported game data at `data_path`.

    :param str data_path: file written by export-game-data
    :param str blacklist_path: file of ingredient names to exclude
    :param str whitelist_path: file of the only ingredient names to use
    :param int limit: number of potions to print
    :param out: stream to print to; stdout by default
    :return: the potions printed
    :rtype: list[skyalchemy.types.Potion]
    """
    if limit < 1:
        raise exceptions.GeneralError("limit must be at least 1")

    if out is None:
        out = sys.stdout

    game_data = GameData.load(data_path)
    game_data.purge_invalid()

    blacklist = read_lines(blacklist_path) if blacklist_path else None
    whitelist = read_lines(whitelist_path) if whitelist_path else None

    potions_list = PotionsList(game_data, select_ingredients(
        game_data, blacklist, whitelist))
    potions_list.build_potions()

    potions = potions_list.top(limit)
    if potions:
        print("\n\n".join(str(p) for p in potions), file=out)
    else:
        _logger.warning("No potions can be made from the chosen "
                        "ingredients")
    return potions
