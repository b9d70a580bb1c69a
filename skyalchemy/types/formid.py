from collections import namedtuple

# form ids stored in plugins carry the master index in the top byte
FORM_ID_MASK = 0x00FFFFFF


class GlobalFormId(namedtuple("GlobalFormId", "load_order_index form_id")):
    """
    Identifies a record independently of the plugin it was read from:
    ``load_order_index`` is a position in a LoadOrder and ``form_id``
    is the record's id with the master byte removed.

    Ordering and hashing come from the tuple, so ids sort by plugin
    first and then by local id.
    """
    __slots__ = ()

    def __str__(self):
        return "{:04}:{:06X}".format(self.load_order_index, self.form_id)

    def with_index(self, load_order_index):
        """Return a copy pointing at a different load order entry"""
        return self._replace(load_order_index=load_order_index)

    def remapped(self, remap):
        """
        :param dict[int, int] remap: old load order index to new, as
            returned by LoadOrder.drain_unused()
        """
        return self.with_index(remap[self.load_order_index])

    def to_dict(self):
        return {"load_order_index": self.load_order_index,
                "form_id": self.form_id}

    @classmethod
    def from_dict(cls, data):
        return cls(int(data["load_order_index"]), int(data["form_id"]))


class FormIdContainer:
    """Mixin for anything identified by a ``global_form_id`` attribute"""
    __slots__ = ()

    @property
    def load_order_index(self):
        return self.global_form_id.load_order_index
