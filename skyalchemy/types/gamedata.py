import json

from skyalchemy import exceptions
from skyalchemy.skylog import newLogger
from skyalchemy.types.ingredient import Ingredient
from skyalchemy.types.loadorder import LoadOrder
from skyalchemy.types.magiceffect import MagicEffect
from skyalchemy.utils.fsutils import open_atomic

_logger = newLogger(__name__)

FIELDS = ("load_order", "ingredients", "magic_effects")


class GameData:
    """
    The ingredients and magic effects of a load order, keyed by
    GlobalFormId. On construction the load order is compacted down to
    the plugins that actually define something and every form id is
    remapped to match.
    """

    def __init__(self, load_order, ingredients, magic_effects):
        """
        :param LoadOrder|list[str] load_order:
        :param ingredients: iterable of Ingredient, or a dict whose
            values are Ingredients
        :param magic_effects: iterable of MagicEffect, or a dict whose
            values are MagicEffects
        """
        if not isinstance(load_order, LoadOrder):
            load_order = LoadOrder(load_order)
        if isinstance(ingredients, dict):
            ingredients = ingredients.values()
        if isinstance(magic_effects, dict):
            magic_effects = magic_effects.values()

        ingredients = list(ingredients)
        magic_effects = list(magic_effects)

        # Remove unused entries from the load order. Effects count as a
        # use so that a dangling reference still names the right plugin
        used_indexes = [x.load_order_index
                        for x in ingredients + magic_effects]
        used_indexes.extend(e.load_order_index for i in ingredients
                            for e in i.effects)
        remap = load_order.drain_unused(used_indexes)

        if remap is not None:
            # copies, so the caller's objects keep their own ids
            ingredients = [i.remapped(remap) for i in ingredients]
            magic_effects = [m.remapped(remap) for m in magic_effects]

        self.load_order = load_order
        self._ingredients = {i.global_form_id: i for i in ingredients}
        self._magic_effects = {m.global_form_id: m for m in magic_effects}

    ##=============================================
    ## Access
    ##=============================================

    @property
    def ingredients(self):
        """:rtype: dict[GlobalFormId, Ingredient]"""
        return self._ingredients

    @property
    def magic_effects(self):
        """:rtype: dict[GlobalFormId, MagicEffect]"""
        return self._magic_effects

    def get_ingredient(self, global_form_id):
        return self._ingredients.get(global_form_id)

    def get_magic_effect(self, global_form_id):
        return self._magic_effects.get(global_form_id)

    def find_ingredients(self, names):
        """
        Return the ingredients whose in-game name is in `names`.

        :param names: collection of names
        :rtype: list[Ingredient]
        """
        return [i for i in self._ingredients.values() if i.name in names]

    ##=============================================
    ## Validation
    ##=============================================

    def validate(self):
        """
        Check that every ingredient effect refers to a known magic
        effect, and that no ingredient lists an effect twice.

        :return: list of errors (at most one per ingredient); empty if
            the data is consistent
        :rtype: list[exceptions.IngredientError]
        """
        errors = []
        for ing in self._ingredients.values():
            unknown = [exceptions.UnknownFormIdError(e.global_form_id)
                       for e in ing.effects
                       if e.global_form_id not in self._magic_effects]
            if unknown:
                errors.append(
                    exceptions.ReferencesUnknownMagicEffectsError(ing,
                                                                  unknown))
            elif len(ing.effect_ids) != len(ing.effects):
                errors.append(exceptions.DuplicateEffectsError(ing))
        return errors

    def purge_invalid(self):
        """Remove ingredients that fail validation.

        :return: number of ingredients removed
        """
        errors = self.validate()
        if not errors:
            return 0

        _logger.warning("Ignoring %d invalid ingredients: %s", len(errors),
                        "\n".join(str(e) for e in errors))

        for err in errors:
            del self._ingredients[err.ingredient.global_form_id]
        return len(errors)

    ##=============================================
    ## Serialization
    ##=============================================

    def to_dict(self):
        return {
            "load_order": self.load_order.to_list(),
            "ingredients": [i.to_dict() for _, i in
                            sorted(self._ingredients.items())],
            "magic_effects": [m.to_dict() for _, m in
                              sorted(self._magic_effects.items())],
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise exceptions.GameDataError(
                "game data must be a JSON object")

        for field in FIELDS:
            if field not in data:
                raise exceptions.GameDataError(
                    "missing field '{}'".format(field))

        try:
            return cls(
                [str(e) for e in data["load_order"]],
                [Ingredient.from_dict(i) for i in data["ingredients"]],
                [MagicEffect.from_dict(m) for m in data["magic_effects"]])
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise exceptions.GameDataError(
                "invalid game data: {!r}".format(e)) from e

    def save(self, path):
        """Write the game data to `path` as JSON, atomically"""
        with open_atomic(str(path)) as f:
            json.dump(self.to_dict(), f, indent=2)
        _logger.info("Wrote %d ingredients and %d magic effects to %s",
                     len(self._ingredients), len(self._magic_effects), path)

    @classmethod
    def load(cls, path):
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise exceptions.FileAccessError(
                path, "Could not read game data file '{file}'") from e
        except ValueError as e:
            raise exceptions.GameDataError(
                "{} is not valid JSON: {}".format(path, e)) from e

        game_data = cls.from_dict(data)
        _logger.debug("Loaded %d ingredients and %d magic effects from %s",
                      len(game_data.ingredients),
                      len(game_data.magic_effects), path)
        return game_data
