from skyalchemy.constants import AlchemyInfo
from skyalchemy.types.formid import GlobalFormId, FormIdContainer


class IngredientEffect(FormIdContainer):
    """One of the (usually four) effects listed on an ingredient.
    ``global_form_id`` refers to the MagicEffect."""
    __slots__ = ('global_form_id', 'magnitude', 'duration')

    def __init__(self, global_form_id, magnitude=0.0, duration=0):
        """
        :param GlobalFormId global_form_id:
        :param float magnitude:
        :param int duration: in seconds
        """
        self.global_form_id = global_form_id
        self.magnitude = magnitude
        self.duration = duration

    def __eq__(self, other):
        if not isinstance(other, IngredientEffect):
            return NotImplemented
        return (self.global_form_id, self.magnitude, self.duration) == \
               (other.global_form_id, other.magnitude, other.duration)

    __hash__ = None

    def remapped(self, remap):
        return IngredientEffect(self.global_form_id.remapped(remap),
                                self.magnitude, self.duration)

    def __repr__(self):
        return "IngredientEffect({!s}, magnitude={}, duration={})".format(
            self.global_form_id, self.magnitude, self.duration)

    def to_dict(self):
        return {"global_form_id": self.global_form_id.to_dict(),
                "magnitude": self.magnitude,
                "duration": self.duration}

    @classmethod
    def from_dict(cls, data):
        return cls(GlobalFormId.from_dict(data["global_form_id"]),
                   float(data["magnitude"]),
                   int(data["duration"]))


class Ingredient(FormIdContainer):
    __slots__ = ('global_form_id', 'editor_id', 'name', 'effects')

    def __init__(self, global_form_id, editor_id, name=None, effects=None):
        """

        :param GlobalFormId global_form_id:
        :param str editor_id:
        :param str name: in-game name; None if the record has none
        :param list[IngredientEffect] effects:
        """
        self.global_form_id = global_form_id
        self.editor_id = editor_id
        self.name = name
        self.effects = list(effects) if effects else []

    # the form id is enough to tell ingredients apart
    def __eq__(self, other):
        if not isinstance(other, Ingredient):
            return NotImplemented
        return self.global_form_id == other.global_form_id

    def __hash__(self):
        return hash(self.global_form_id)

    def remapped(self, remap):
        """A copy with every form id passed through GlobalFormId.remapped()"""
        return Ingredient(self.global_form_id.remapped(remap),
                          self.editor_id, self.name,
                          [e.remapped(remap) for e in self.effects])

    def __repr__(self):
        return "Ingredient({!s}, {!r})".format(self.global_form_id,
                                               self.display_name)

    @property
    def display_name(self):
        """The in-game name, falling back to the editor id"""
        return self.name if self.name is not None else self.editor_id

    @property
    def sort_name(self):
        return self.name or AlchemyInfo.missing_ingredient_name

    @property
    def effect_ids(self):
        return frozenset(e.global_form_id for e in self.effects)

    def shares_effects_with(self, other):
        """Returns whether the ingredient shares any effects with
        another ingredient (and thus can be combined)"""
        # effects lists are (essentially) limited to 4 elements
        return any(e.global_form_id in other.effect_ids
                   for e in self.effects)

    def effects_shared_with(self, other):
        """
        :param Ingredient other:
        :return: the set of magic effect ids both ingredients carry
        :rtype: frozenset[GlobalFormId]
        """
        return self.effect_ids & other.effect_ids

    def to_dict(self):
        return {"global_form_id": self.global_form_id.to_dict(),
                "editor_id": self.editor_id,
                "name": self.name,
                "effects": [e.to_dict() for e in self.effects]}

    @classmethod
    def from_dict(cls, data):
        return cls(GlobalFormId.from_dict(data["global_form_id"]),
                   data["editor_id"],
                   data.get("name"),
                   [IngredientEffect.from_dict(e) for e in data["effects"]])
