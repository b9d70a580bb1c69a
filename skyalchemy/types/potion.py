"""
Potions brewed from two or three ingredients, and the value
calculations behind them.

See https://en.uesp.net/wiki/Skyrim:Alchemy_Effects
"""
import math
from collections import Counter

from skyalchemy import exceptions
from skyalchemy.constants import AlchemyInfo, MagicEffectFlag, PotionType
from skyalchemy.types.formid import FormIdContainer

# gold values are stored by the game as 16-bit integers
_MAX_GOLD = 0xFFFF


def round_half_away(value):
    """Round to the nearest integer, halves away from zero.
    (The builtin round() rounds halves to even.)
    NaN and infinities give 0."""
    if not math.isfinite(value):
        return 0
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def calc_magnitude(base_magnitude, magic_effect_flags):
    """
    Returns the actual magnitude, taking into account various factors

    Note: this does not currently include every factor (skill, perks)
    so it won't be fully accurate

    :param float base_magnitude:
    :param int magic_effect_flags:
    :rtype: int
    """
    if magic_effect_flags & MagicEffectFlag.NO_MAGNITUDE:
        magnitude = 0.0
    else:
        magnitude = base_magnitude

    if magic_effect_flags & MagicEffectFlag.POWER_AFFECTS_MAGNITUDE:
        magnitude *= AlchemyInfo.effect_power_factor

    return round_half_away(magnitude)


def calc_duration(base_duration, magic_effect_flags):
    """
    Returns the actual duration, taking into account various factors

    :param int base_duration:
    :param int magic_effect_flags:
    :rtype: int
    """
    if magic_effect_flags & MagicEffectFlag.NO_DURATION:
        duration = 0.0
    else:
        duration = float(base_duration)

    if magic_effect_flags & MagicEffectFlag.POWER_AFFECTS_DURATION:
        duration *= AlchemyInfo.effect_power_factor

    return round_half_away(duration)


def calc_gold_value(magnitude, duration, base_cost):
    """
    Returns the gold value of an effect with its magnitude and duration
    factored in.

    :param int magnitude:
    :param int duration: a duration of 0 is treated as 10
    :param float base_cost: the magic effect's base cost
    :rtype: int
    """
    magnitude_factor = max(magnitude, 1)
    duration_factor = (duration or 10) / 10.0

    value = base_cost * (magnitude_factor * duration_factor) ** 1.1
    if math.isnan(value):
        return 0
    # saturates, so an infinite base cost is worth the most gold
    return int(min(max(value, 0), _MAX_GOLD))


class PotionEffect(FormIdContainer):
    """An IngredientEffect resolved against its MagicEffect"""
    __slots__ = ('magic_effect', 'magnitude', 'duration', 'gold_value')

    def __init__(self, magic_effect, magnitude, duration, gold_value):
        self.magic_effect = magic_effect
        self.magnitude = magnitude
        self.duration = duration
        self.gold_value = gold_value

    @classmethod
    def from_ingredient_effect(cls, ingredient_effect, game_data):
        """
        :param skyalchemy.types.ingredient.IngredientEffect ingredient_effect:
        :param skyalchemy.types.gamedata.GameData game_data:
        """
        magic_effect = game_data.get_magic_effect(
            ingredient_effect.global_form_id)
        if magic_effect is None:
            raise exceptions.UnknownFormIdError(
                ingredient_effect.global_form_id)

        magnitude = calc_magnitude(ingredient_effect.magnitude,
                                   magic_effect.flags)
        duration = calc_duration(ingredient_effect.duration,
                                 magic_effect.flags)
        return cls(magic_effect, magnitude, duration,
                   calc_gold_value(magnitude, duration,
                                   magic_effect.base_cost))

    @property
    def global_form_id(self):
        return self.magic_effect.global_form_id

    @property
    def description(self):
        return self.magic_effect.description \
            .replace("<mag>", str(self.magnitude)) \
            .replace("<dur>", str(self.duration))

    def __repr__(self):
        return "PotionEffect({!r}, magnitude={}, duration={}, " \
               "gold_value={})".format(self.magic_effect, self.magnitude,
                                       self.duration, self.gold_value)


class Potion:
    __slots__ = ('ingredients', 'effects', 'gold_value')

    def __init__(self, ingredients, effects):
        """
        Use from_ingredients() rather than calling this directly.

        :param tuple ingredients:
        :param list[PotionEffect] effects: sorted by strength descending
        """
        self.ingredients = tuple(ingredients)
        self.effects = effects
        # See https://en.uesp.net/wiki/Skyrim:Alchemy_Effects#Multiple-Effect_Potions
        self.gold_value = sum(e.gold_value for e in effects)

    @classmethod
    def from_ingredients(cls, ingredients, game_data):
        """
        Mix `ingredients` into a potion.

        :param ingredients: sequence of 2 or 3 Ingredients
        :param skyalchemy.types.gamedata.GameData game_data:
        :raises PotionCraftError: if the ingredients can't be combined
        :raises UnknownFormIdError: if an active effect is not in
            `game_data`
        """
        ingredients = tuple(ingredients)

        if len(ingredients) < AlchemyInfo.min_ingredients:
            raise exceptions.NotEnoughIngredientsError()
        if len(ingredients) > AlchemyInfo.max_ingredients:
            raise exceptions.TooManyIngredientsError()

        seen = set()
        for ing in ingredients:
            if ing in seen:
                raise exceptions.DuplicateIngredientError(ing)
            seen.add(ing)

        for ing in ingredients:
            if len(ing.effect_ids) != len(ing.effects):
                raise exceptions.InvalidIngredientError(ing)

        counts = Counter(e.global_form_id for ing in ingredients
                         for e in ing.effects)
        if all(c < 2 for c in counts.values()):
            raise exceptions.NoSharedEffectsError()

        # active effects are those that appear in more than one
        # ingredient; keep the most valuable (strongest) version of each
        strongest = {}
        for ing in ingredients:
            for igef in ing.effects:
                if counts[igef.global_form_id] < 2:
                    continue
                potef = PotionEffect.from_ingredient_effect(igef, game_data)
                best = strongest.get(potef.global_form_id)
                if best is None or potef.gold_value > best.gold_value:
                    strongest[potef.global_form_id] = potef

        # sort by gold value from largest to smallest; ties stay in
        # form id order
        effects = sorted(sorted(strongest.values(),
                                key=lambda e: e.global_form_id),
                         key=lambda e: e.gold_value, reverse=True)

        return cls(ingredients, effects[:AlchemyInfo.max_effects])

    @property
    def primary_effect(self):
        # the effects are sorted by strength descending
        return self.effects[0]

    @property
    def potion_type(self):
        if self.primary_effect.magic_effect.is_hostile:
            return PotionType.Poison
        return PotionType.Potion

    @property
    def name(self):
        effect_name = self.primary_effect.magic_effect.name \
                      or AlchemyInfo.missing_effect_name
        return "{} of {}".format(self.potion_type, effect_name)

    @property
    def description(self):
        return " ".join(e.description for e in self.effects)

    def __str__(self):
        return "{}\n{}\nValue: {} gold\nIngredients:\n{}".format(
            self.name,
            self.description,
            self.gold_value,
            "\n".join("- " + (ing.name or
                              AlchemyInfo.missing_ingredient_name)
                      for ing in self.ingredients))

    def __repr__(self):
        return "Potion({!r}, gold_value={})".format(
            [ing.display_name for ing in self.ingredients], self.gold_value)
