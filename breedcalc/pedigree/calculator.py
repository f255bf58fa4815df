import enum
import logging
from collections import namedtuple

import numpy as np

from .analysis import analyzer
from .memo import UnitMemo

logger = logging.getLogger(__name__)


class PathMode(enum.Enum):
    # Every path pair through a common ancestor counts, including pairs that
    # share an intermediate node, so deep full sibs score above 0.25 (see
    # DESIGN.md, decision 3).
    FULL = 'full'
    # Path pairs sharing an intermediate node are discarded.
    INDEPENDENT = 'independent'


Coefficient = namedtuple('Coefficient', ['value', 'mode', 'cycle_detected'])


class RelatednessEngine:
    def __init__(self, mode=PathMode.FULL, memo=None):
        """
        Path-coefficient calculator for one pedigree graph.

        The memo decides how long results live (see memo.py). Caches are
        namespaced by path mode, since the two modes disagree on F for the
        same individual. The guard set is plain per-instance state, so an
        engine must stay on one thread.
        """
        self.mode = PathMode(mode)
        self.memo = memo if memo is not None else UnitMemo()
        self.F_cache = self.memo.table(f'{self.mode.value}.inbreeding')
        self.pair_cache = self.memo.table(f'{self.mode.value}.offspring')
        self.path_cache = self.memo.table('paths')
        self.currently_computing = set()

    def inbreeding_of(self, individual):
        """Returns the individual's own inbreeding coefficient."""
        return self._inbreeding(individual)[0]

    def offspring_inbreeding(self, parent1, parent2):
        """
        Returns the inbreeding coefficient of a hypothetical offspring of the
        two parents, which equals the coancestry of the pair.
        """
        return self._offspring(parent1, parent2)[0]

    def evaluate(self, parent1, parent2):
        """
        Same as offspring_inbreeding, tagged with the path mode and with
        whether a cycle short-circuit fed into the value.
        """
        value, cycle_detected = self._offspring(parent1, parent2)
        return Coefficient(value, self.mode, cycle_detected)

    def _inbreeding(self, individual):
        if individual is None:
            return 0.0, False
        animal_id = individual.identifier

        cached = self.F_cache.get(animal_id)
        if cached is not None:
            return cached

        if animal_id in self.currently_computing:
            logger.warning("Cycle through %s; its inbreeding is taken as 0.0.", animal_id)
            return 0.0, True

        self.currently_computing.add(animal_id)
        try:
            if individual.dam is not None and individual.sire is not None:
                result = self._offspring(individual.dam, individual.sire)
            else:
                result = (0.0, False)
        finally:
            self.currently_computing.discard(animal_id)

        self.F_cache[animal_id] = result
        return result

    def _offspring(self, parent1, parent2):
        if parent1 is None or parent2 is None:
            return 0.0, False

        # The same pair always takes the same route, whatever the call order.
        if parent1.identifier > parent2.identifier:
            parent1, parent2 = parent2, parent1
        key = (parent1.identifier, parent2.identifier)

        cached = self.pair_cache.get(key)
        if cached is not None:
            return cached

        # Find all ancestors for both parents, each parent included, to
        # identify common ones.
        ancestors1 = {a.identifier: a for a in analyzer.ancestors_of(parent1)}
        ancestors1[parent1.identifier] = parent1
        ancestors2 = {a.identifier: a for a in analyzer.ancestors_of(parent2)}
        ancestors2[parent2.identifier] = parent2
        common_ancestors = sorted(ancestors1.keys() & ancestors2.keys())

        total = 0.0
        cycle_detected = False
        for ancestor_id in common_ancestors:
            ancestor = ancestors1[ancestor_id]
            ancestor_inbreeding, ancestor_cycle = self._inbreeding(ancestor)
            cycle_detected = cycle_detected or ancestor_cycle

            paths1 = self._paths(parent1, ancestor)
            paths2 = self._paths(parent2, ancestor)
            total += self._fold(paths1, paths2) * (1.0 + ancestor_inbreeding)

        result = (total, cycle_detected)
        self.pair_cache[key] = result
        return result

    def _paths(self, start, target):
        key = (start.identifier, target.identifier)
        paths = self.path_cache.get(key)
        if paths is None:
            paths = [analyzer.path_ids(p) for p in analyzer.simple_paths(start, target)]
            self.path_cache[key] = paths
        return paths

    def _fold(self, paths1, paths2):
        """Sums 0.5 ** (n1 + n2 + 1) over the path pairs that count."""
        if not paths1 or not paths2:
            return 0.0
        n1 = np.array([len(p) - 1 for p in paths1], dtype=np.int64)
        n2 = np.array([len(p) - 1 for p in paths2], dtype=np.int64)
        weights = np.power(0.5, n1[:, None] + n2[None, :] + 1)

        if self.mode is PathMode.INDEPENDENT:
            mask = np.array(
                [[analyzer.paths_are_independent(p, q) for q in paths2] for p in paths1],
                dtype=bool,
            )
            weights = weights[mask]

        return float(weights.sum())
