import heapq
import time
from itertools import combinations

from skyalchemy.types.potion import Potion
from skyalchemy.utils import withlogger


class SharedEffectsCache:
    """
    Remembers which magic effects two ingredients have in common.
    The pair is unordered, so (a, b) and (b, a) share an entry.
    """

    def __init__(self):
        self._cache = {}
        self.hits = 0

    @staticmethod
    def _key(a, b):
        ka, kb = a.global_form_id, b.global_form_id
        return (ka, kb) if ka <= kb else (kb, ka)

    def shared_effects(self, a, b):
        """
        :rtype: frozenset[skyalchemy.types.formid.GlobalFormId]
        """
        key = self._key(a, b)
        try:
            shared = self._cache[key]
        except KeyError:
            shared = self._cache[key] = a.effects_shared_with(b)
        else:
            self.hits += 1
        return shared

    def shares_effects_with(self, a, b):
        return bool(self.shared_effects(a, b))

    def clear(self):
        self._cache.clear()
        self.hits = 0

    def __len__(self):
        return len(self._cache)


def _edges_differ(edge_1, edge_2, edge_3=None):
    """
    Each ingredient must contribute at least one unique effect when
    combined with the others. With two edges, they must not carry the
    same effects; with three, at least two of the three pairs of edges
    must differ.

    :param frozenset edge_1:
    :param frozenset edge_2:
    :param frozenset edge_3:
    """
    if edge_3 is None:
        return edge_1 != edge_2

    d12 = edge_1 != edge_2
    d23 = edge_2 != edge_3
    d31 = edge_3 != edge_1

    return (d12 and (d31 or d23)) or (d31 and d23)


@withlogger
class PotionsList:
    """
    Every useful potion that can be mixed from the ingredients in a
    GameData, in order of gold value. Filter the game data's
    ingredients before handing it over; all of them are considered.
    """

    def __init__(self, game_data, ingredients=None):
        """
        :param skyalchemy.types.gamedata.GameData game_data:
        :param ingredients: the ingredients to combine; defaults to all
            of those in `game_data`
        """
        self.game_data = game_data
        if ingredients is None:
            ingredients = game_data.ingredients.values()
        self.ingredients = sorted(ingredients,
                                  key=lambda i: (i.sort_name,
                                                 i.global_form_id))
        self.cache = SharedEffectsCache()
        self.potions_2 = []
        self.potions_3 = []

    def build_potions(self):
        """Computes all possible potions"""
        self.potions_2 = self.build_potions_2()
        self.potions_3 = self.build_potions_3()
        self.LOGGER.info("Found %d 2-ingredient and %d 3-ingredient potions",
                         len(self.potions_2), len(self.potions_3))

    def build_potions_2(self):
        """Compute the list of potions with 2 ingredients"""
        start = time.perf_counter()
        combos = [(a, b) for a, b in combinations(self.ingredients, 2)
                  if self.cache.shares_effects_with(a, b)]
        self.LOGGER.debug("Found %d valid 2-ingredient combos (in %.3fs)",
                          len(combos), time.perf_counter() - start)

        return self._make_potions(combos)

    def build_potions_3(self):
        """Compute the list of potions with 3 ingredients"""
        start = time.perf_counter()

        position = {ing: n for n, ing in enumerate(self.ingredients)}

        # every useful triple has at least two edges, so some member
        # shares an effect with both of the others; collect triples
        # around each ingredient's neighbours rather than walking all
        # n^3 combinations
        neighbours = {ing: [] for ing in self.ingredients}
        for a, b in combinations(self.ingredients, 2):
            if self.cache.shares_effects_with(a, b):
                neighbours[a].append(b)
                neighbours[b].append(a)

        candidates = set()
        for centre, others in neighbours.items():
            for b, c in combinations(others, 2):
                candidates.add(tuple(sorted((centre, b, c),
                                            key=position.__getitem__)))

        combos = sorted((c for c in candidates if self._is_valid_3(*c)),
                        key=lambda c: tuple(position[i] for i in c))
        self.LOGGER.debug("Found %d valid 3-ingredient combos (in %.3fs)",
                          len(combos), time.perf_counter() - start)

        return self._make_potions(combos)

    def _is_valid_3(self, a, b, c):
        """
        We require at least two edges that contribute a unique effect
        (otherwise one of the ingredients is used for no reason and goes
        to waste)::

              a
            /   \\
           c --- b
        """
        ab = self.cache.shared_effects(a, b)
        bc = self.cache.shared_effects(b, c)
        ca = self.cache.shared_effects(c, a)

        edges = [e for e in (ab, bc, ca) if e]
        if len(edges) == 2:
            return _edges_differ(*edges)
        if len(edges) == 3:
            return _edges_differ(ab, bc, ca)
        # anything else does not have at least 2 edges
        return False

    def _make_potions(self, combos):
        start = time.perf_counter()
        potions = [Potion.from_ingredients(combo, self.game_data)
                   for combo in combos]
        # stable, so equal values keep the (name-sorted) combo order
        potions.sort(key=lambda p: p.gold_value, reverse=True)
        self.LOGGER.debug("Created and sorted %d Potion instances "
                          "(in %.3fs)", len(potions),
                          time.perf_counter() - start)
        return potions

    def __iter__(self):
        """Iterate over all potions, most valuable first"""
        # on equal value, 3-ingredient potions come first
        return heapq.merge(self.potions_3, self.potions_2,
                           key=lambda p: -p.gold_value)

    def __len__(self):
        return len(self.potions_2) + len(self.potions_3)

    def top(self, limit):
        """
        :param int limit:
        :return: at most `limit` of the most valuable potions
        :rtype: list[Potion]
        """
        potions = []
        for potion in self:
            if len(potions) >= limit:
                break
            potions.append(potion)
        return potions
