import mmap
import time
from pathlib import Path

from skyalchemy import exceptions
from skyalchemy.constants import SkyrimGameInfo, DEFAULT_LANGUAGE
from skyalchemy.plugins import parse_plugin
from skyalchemy.types import LoadOrder, GameData
from skyalchemy.utils import withlogger
from skyalchemy.utils.fsutils import find_path_ci


@withlogger
class GameDataExporter:
    """
    Reads every plugin in the active load order and collects the
    ingredients and magic effects that end up in the game, i.e. the
    version from the last plugin to touch each record.
    """

    def __init__(self, game_path, local_path=None,
                 language=DEFAULT_LANGUAGE):
        """
        :param str|Path game_path: directory containing SkyrimSE.exe
        :param str|Path local_path: directory containing plugins.txt;
            see LoadOrder.from_game()
        :param str language: strings file language
        """
        self.game_path = Path(game_path)
        self.local_path = local_path
        self.language = language

        self.load_order = None # type: LoadOrder

        # keyed by GlobalFormId so later plugins replace earlier ones
        self.ingredients = {}
        self.magic_effects = {}

    @property
    def data_path(self):
        return self.game_path / SkyrimGameInfo.data_dir

    ##=============================================
    ## Steps
    ##=============================================

    def load_load_order(self):
        self.load_order = LoadOrder.from_game(self.game_path,
                                              self.local_path)
        if self.load_order.is_empty():
            raise exceptions.LoadOrderError("Load order empty!")

        self.LOGGER.info("Load order has %d plugins", len(self.load_order))
        return self.load_order

    def parse_plugins(self):
        """Read each plugin of the load order, in order"""
        if self.load_order is None:
            self.load_load_order()

        for plugin_name in self.load_order:
            self.parse_plugin_file(plugin_name)

        self.LOGGER.info("Found %d ingredients and %d magic effects",
                         len(self.ingredients), len(self.magic_effects))

    def parse_plugin_file(self, plugin_name):
        path = find_path_ci(self.data_path, plugin_name)
        if path is None:
            raise exceptions.FileAccessError(
                plugin_name, "Plugin '{file}' not found in "
                + str(self.data_path))

        start = time.perf_counter()
        try:
            with open(path, "rb") as f:
                if path.stat().st_size == 0:
                    raise exceptions.PluginParseError(plugin_name,
                                                      "file is empty")
                with mmap.mmap(f.fileno(), 0,
                               access=mmap.ACCESS_READ) as buffer:
                    ingredients, magic_effects = parse_plugin(
                        buffer, plugin_name, self.load_order,
                        self.data_path, self.language)
        except OSError as e:
            raise exceptions.FileAccessError(
                path, "Could not read plugin '{file}': "
                + (e.strerror or str(e))) from e

        for ingredient in ingredients:
            self.ingredients[ingredient.global_form_id] = ingredient
        for magic_effect in magic_effects:
            self.magic_effects[magic_effect.global_form_id] = magic_effect

        self.LOGGER << "{}: {} ingredients, {} magic effects ({:.3f}s)".format(
            plugin_name, len(ingredients), len(magic_effects),
            time.perf_counter() - start)

    def build_game_data(self):
        """
        Combine what was parsed into GameData, keeping only the magic
        effects some ingredient uses and dropping invalid ingredients.

        :rtype: GameData
        """
        used = {e.global_form_id for i in self.ingredients.values()
                for e in i.effects}

        magic_effects = {k: v for k, v in self.magic_effects.items()
                         if k in used}

        missing = used.difference(magic_effects)
        if missing:
            self.LOGGER.warning(
                "%d magic effects used by ingredients were not found: %s",
                len(missing), ", ".join(str(m) for m in sorted(missing)))

        # GameData compacts the load order, so give it a copy
        game_data = GameData(LoadOrder(self.load_order),
                             self.ingredients, magic_effects)
        game_data.purge_invalid()
        return game_data

    def export(self, export_path):
        """
        Do everything: read the load order and plugins, then write the
        game data to `export_path`.

        :rtype: GameData
        """
        self.load_load_order()
        self.parse_plugins()
        game_data = self.build_game_data()
        game_data.save(export_path)
        return game_data


def parse_and_export_game_data(game_path, export_path, local_path=None,
                               language=DEFAULT_LANGUAGE):
    """
    :return: the exported GameData
    """
    return GameDataExporter(game_path, local_path, language).export(
        export_path)
