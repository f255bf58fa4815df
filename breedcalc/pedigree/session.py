import logging
from dataclasses import dataclass

from .calculator import PathMode, RelatednessEngine
from .graph import AttachPolicy, PedigreeGraph
from .memo import MEMO_SCOPES, make_memo
from .validation.validator import (
    InputError,
    ValidationError,
    record_identifier,
    require_identifier,
    validate_request,
)

logger = logging.getLogger(__name__)

UNITS = ('batch', 'pair')
DECIMALS = 8


@dataclass(frozen=True)
class CalculationOptions:
    """
    How one request is computed.

    path_mode: full accumulation or independent paths.
    memo_scope: 'none', 'unit' or 'process' (see memo.py).
    attach_policy: first-wins or overwrite when records disagree on a parent.
    unit: 'batch' shares one graph between the subject and every partner,
        'pair' builds a fresh graph from the subject and one partner only.
    """
    path_mode: PathMode = PathMode.FULL
    memo_scope: str = 'unit'
    attach_policy: AttachPolicy = AttachPolicy.FIRST_WINS
    unit: str = 'batch'

    def __post_init__(self):
        object.__setattr__(self, 'path_mode', PathMode(self.path_mode))
        object.__setattr__(self, 'attach_policy', AttachPolicy(self.attach_policy))
        if self.memo_scope not in MEMO_SCOPES:
            raise ValueError(f"Unknown memo scope: {self.memo_scope!r}. Expected one of {MEMO_SCOPES}.")
        if self.unit not in UNITS:
            raise ValueError(f"Unknown computation unit: {self.unit!r}. Expected one of {UNITS}.")

    @classmethod
    def from_mapping(cls, config):
        """Builds options from BREEDCALC_* config keys or plain option names."""
        def pick(name):
            value = config.get(name)
            if value is None:
                value = config.get(f'BREEDCALC_{name.upper()}')
            return value

        values = {}
        for name in ('path_mode', 'memo_scope', 'attach_policy', 'unit'):
            value = pick(name)
            if value is not None:
                values[name] = value.strip().lower() if isinstance(value, str) else value
        return cls(**values)


@dataclass(frozen=True)
class PairResult:
    subject_id: str
    partner_id: str
    coefficient: float
    mode: PathMode
    cycle_detected: bool = False

    def to_dict(self):
        return {
            'subjectId': self.subject_id,
            'partnerId': self.partner_id,
            'coefficient': self.coefficient,
            'mode': self.mode.value,
            'cycleDetected': self.cycle_detected,
        }


class PedigreeSession:
    """
    One computation unit: exactly one graph and one engine, built from the
    given records. Nothing it creates outlives it unless the memo scope is
    'process'.
    """

    def __init__(self, records, options=None):
        self.options = options or CalculationOptions()
        self.graph = PedigreeGraph(self.options.attach_policy).load(records)
        self.engine = RelatednessEngine(
            self.options.path_mode, make_memo(self.options.memo_scope)
        )
        logger.debug(
            "Session with %d individuals (mode=%s, memo=%s, attach=%s).",
            len(self.graph), self.options.path_mode.value,
            self.options.memo_scope, self.options.attach_policy.value,
        )

    def pair(self, subject_id, partner_id):
        subject_id = require_identifier(subject_id)
        partner_id = require_identifier(partner_id)
        # The graph is read-only once loaded; an unknown id pairs as 0.0.
        outcome = self.engine.evaluate(self.graph.get(partner_id), self.graph.get(subject_id))
        return PairResult(
            subject_id=subject_id,
            partner_id=partner_id,
            coefficient=round(outcome.value, DECIMALS),
            mode=outcome.mode,
            cycle_detected=outcome.cycle_detected,
        )


def calculate_breeding_inbreeding(subject, partners, options=None):
    """
    Expected offspring inbreeding for the subject paired with each partner.

    Args:
        subject (dict): Flattened record of the subject (female side).
        partners (list): Flattened records of the partners (male side),
            ideally with their own ancestor chains.
        options (CalculationOptions): Defaults to full accumulation,
            unit-scoped memo, first-wins attachment, batch unit.

    Returns:
        list: Result dicts in partner input order. Empty when the request
        itself is unusable; unidentifiable partners are skipped.
    """
    options = options or CalculationOptions()
    try:
        validate_request(subject, partners)
    except InputError as e:
        logger.error("Invalid calculation input: %s", e)
        return []

    subject_id = record_identifier(subject)
    results = []

    session = None
    if options.unit == 'batch':
        session = PedigreeSession([subject] + list(partners), options)

    for index, partner in enumerate(partners):
        partner_id = record_identifier(partner)
        if partner_id is None:
            logger.warning("Partner record %d has no usable identifier, skipping.", index)
            continue

        unit_session = session if session is not None else PedigreeSession([subject, partner], options)
        try:
            result = unit_session.pair(subject_id, partner_id)
        except ValidationError as e:
            logger.warning("Skipping pair %s x %s: %s", subject_id, partner_id, e)
            continue
        results.append(result.to_dict())

    return results


def rank_results(results):
    """Orders result dicts from least to most inbred offspring."""
    return sorted(results, key=lambda r: (r['coefficient'], r['partnerId']))
