import enum
import logging

from .validation.validator import (
    SUBJECT_KEY,
    canonical_record,
    normalize_identifier,
    record_identifier,
    require_identifier,
)

logger = logging.getLogger(__name__)

# Record slots that act as a child in a derived relation. Each child's dam
# and sire live in the slots named '<child>_dam' and '<child>_sire'.
CHILD_SLOTS = [SUBJECT_KEY, 'sire', 'dam', 'sire_sire', 'sire_dam', 'dam_sire', 'dam_dam']


class AttachPolicy(enum.Enum):
    FIRST_WINS = 'first-wins'
    OVERWRITE = 'overwrite'


class Individual:
    """A node of the pedigree graph. Dam and sire point into the same graph."""

    __slots__ = ('identifier', 'dam', 'sire')

    def __init__(self, identifier, dam=None, sire=None):
        self.identifier = require_identifier(identifier)
        self.dam = dam
        self.sire = sire

    @property
    def is_founder(self):
        return self.dam is None and self.sire is None

    def parents(self):
        return [p for p in (self.dam, self.sire) if p is not None]

    def __repr__(self):
        return f"Individual({self.identifier!r})"


def _parent_slot(child_slot, parent):
    if child_slot == SUBJECT_KEY:
        return parent
    return f"{child_slot}_{parent}"


def relations(record):
    """
    Derives (child_id, dam_id, sire_id) triples from one flattened record.

    Covers the subject, its parents and its four grandparents as children.
    Triples whose child slot is missing are dropped; missing dam/sire slots
    come back as None.
    """
    record = canonical_record(record)
    derived = []
    for child_slot in CHILD_SLOTS:
        child_id = normalize_identifier(record.get(child_slot))
        if child_id is None:
            continue
        dam_id = normalize_identifier(record.get(_parent_slot(child_slot, 'dam')))
        sire_id = normalize_identifier(record.get(_parent_slot(child_slot, 'sire')))
        derived.append((child_id, dam_id, sire_id))
    return derived


class PedigreeGraph:
    """
    Owns every Individual of one computation unit, keyed by identifier.
    The attach policy is fixed for the lifetime of the graph.
    """

    def __init__(self, attach_policy=AttachPolicy.FIRST_WINS):
        self.attach_policy = AttachPolicy(attach_policy)
        self._individuals = {}

    def __len__(self):
        return len(self._individuals)

    def __contains__(self, identifier):
        return normalize_identifier(identifier) in self._individuals

    def individuals(self):
        return list(self._individuals.values())

    def get(self, identifier):
        return self._individuals.get(normalize_identifier(identifier))

    def get_or_create(self, identifier, optional=False):
        """
        Returns the Individual for an identifier, creating it on first use.

        With optional=True a missing identifier yields None instead of a
        ValidationError; this is how empty ancestor slots are read.
        """
        key = normalize_identifier(identifier)
        if key is None:
            if optional:
                return None
            return Individual(identifier)  # raises ValidationError
        individual = self._individuals.get(key)
        if individual is None:
            individual = Individual(key)
            self._individuals[key] = individual
        return individual

    def _attach(self, child, dam, sire):
        if self.attach_policy is AttachPolicy.OVERWRITE:
            if dam is not None:
                child.dam = dam
            if sire is not None:
                child.sire = sire
            return
        if child.dam is None and dam is not None:
            child.dam = dam
        if child.sire is None and sire is not None:
            child.sire = sire

    def load(self, records):
        """
        Builds individuals and dam/sire links from flattened records.

        Args:
            records (list): Flattened records in input order.

        Returns:
            PedigreeGraph: self, for chaining.
        """
        logger.debug("Loading %d records with %s attach policy.",
                     len(records), self.attach_policy.value)
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                logger.debug("Record %d is not a mapping, skipping.", index)
                continue
            if record_identifier(record) is None:
                logger.debug("Record %d has no subject identifier, skipping.", index)
                continue
            for child_id, dam_id, sire_id in relations(record):
                child = self.get_or_create(child_id)
                dam = self.get_or_create(dam_id, optional=True)
                sire = self.get_or_create(sire_id, optional=True)
                self._attach(child, dam, sire)
        return self
