from skyalchemy.constants import MagicEffectFlag
from skyalchemy.types.formid import GlobalFormId, FormIdContainer


class MagicEffect(FormIdContainer):
    __slots__ = ('global_form_id', 'editor_id', 'name', 'description',
                 'flags', 'base_cost')

    def __init__(self, global_form_id, editor_id, name=None,
                 description="", flags=0, base_cost=0.0):
        """

        :param GlobalFormId global_form_id:
        :param str editor_id:
        :param str name:
        :param str description: may contain <mag> and <dur> placeholders
        :param int flags: MGEF DATA flags
        :param float base_cost:
        """
        self.global_form_id = global_form_id
        self.editor_id = editor_id
        self.name = name
        self.description = description
        self.flags = flags
        self.base_cost = base_cost

    @property
    def is_hostile(self):
        return bool(self.flags & MagicEffectFlag.HOSTILE)

    def remapped(self, remap):
        return MagicEffect(self.global_form_id.remapped(remap),
                           self.editor_id, self.name, self.description,
                           self.flags, self.base_cost)

    def __eq__(self, other):
        if not isinstance(other, MagicEffect):
            return NotImplemented
        return all(getattr(self, a) == getattr(other, a)
                   for a in self.__slots__)

    __hash__ = None

    def __repr__(self):
        return "MagicEffect({!s}, {!r})".format(self.global_form_id,
                                                self.name or self.editor_id)

    def to_dict(self):
        return {"global_form_id": self.global_form_id.to_dict(),
                "editor_id": self.editor_id,
                "name": self.name,
                "description": self.description,
                "flags": self.flags,
                "is_hostile": self.is_hostile,
                "base_cost": self.base_cost}

    @classmethod
    def from_dict(cls, data):
        # is_hostile is derived from the flags; it's only written out
        # for the benefit of other readers
        return cls(GlobalFormId.from_dict(data["global_form_id"]),
                   data["editor_id"],
                   data.get("name"),
                   data.get("description") or "",
                   int(data["flags"]),
                   float(data["base_cost"]))
