import pandas as pd

MISSING_TOKENS = {'', 'null', 'undefined', 'none', 'nan'}

# Canonical slot keys of a flattened record, subject first.
SUBJECT_KEY = 'id'
ANCESTOR_SLOTS = [
    'sire', 'dam',
    'sire_sire', 'sire_dam', 'dam_sire', 'dam_dam',
    'sire_sire_sire', 'sire_sire_dam', 'sire_dam_sire', 'sire_dam_dam',
    'dam_sire_sire', 'dam_sire_dam', 'dam_dam_sire', 'dam_dam_dam',
]
RECORD_SLOTS = [SUBJECT_KEY] + ANCESTOR_SLOTS

# Legacy exports spell slots with father/mother letters: 'sire_dam' -> 'fmId'.
_LEGACY_LETTERS = {'sire': 'f', 'dam': 'm'}


def _legacy_key(slot):
    return ''.join(_LEGACY_LETTERS[part] for part in slot.split('_')) + 'Id'


LEGACY_SUBJECT_KEYS = ('sId', 'sid')
LEGACY_ALIASES = {_legacy_key(slot): slot for slot in ANCESTOR_SLOTS}
LEGACY_ALIASES.update({key: SUBJECT_KEY for key in LEGACY_SUBJECT_KEYS})


class PedigreeError(Exception):
    """Base class for pedigree input problems."""


class ValidationError(PedigreeError):
    """An individual was requested for an empty or missing identifier."""


class InputError(PedigreeError):
    """The subject record or the partner collection is unusable."""


def normalize_identifier(value):
    """
    Normalizes a raw identifier from a flattened record.

    Args:
        value: Whatever the record holds in an identifier slot.

    Returns:
        str or None: The trimmed identifier, or None when the value is a
        missing-value marker (None, NaN, empty string, 'null', 'undefined', ...).
    """
    if value is None:
        return None
    if isinstance(value, float):
        if pd.isna(value):
            return None
        if value.is_integer():
            value = int(value)
    text = str(value).strip()
    if text.lower() in MISSING_TOKENS:
        return None
    return text


def require_identifier(value):
    identifier = normalize_identifier(value)
    if identifier is None:
        raise ValidationError(f"Invalid individual identifier: {value!r}")
    return identifier


def canonical_record(record):
    """
    Maps one flattened record onto the canonical slot keys.

    A record carrying a usable 'sId' or 'sid' is read with the legacy
    letter keys only; its 'id' column, if any, is a row number there.
    Values are left raw, identifiers are normalized by the graph.
    """
    if not any(normalize_identifier(record.get(key)) is not None for key in LEGACY_SUBJECT_KEYS):
        return {slot: record[slot] for slot in RECORD_SLOTS if slot in record}

    result = {}
    for alias, slot in LEGACY_ALIASES.items():
        if alias in record and normalize_identifier(result.get(slot)) is None:
            result[slot] = record[alias]
    return result


def record_identifier(record):
    if not isinstance(record, dict):
        return None
    return normalize_identifier(canonical_record(record).get(SUBJECT_KEY))


def validate_request(subject, partners):
    """
    Checks the top-level shape of one calculation request.

    Args:
        subject (dict): The subject (female side) record.
        partners (list): Partner (male side) records.

    Raises:
        InputError: When the subject is missing or unidentifiable, or when
        the partner collection is missing, not a list, or empty.
    """
    # 1. Subject record
    if not isinstance(subject, dict):
        raise InputError("Subject record is missing or not an object.")
    if record_identifier(subject) is None:
        raise InputError("Subject record has no usable identifier.")

    # 2. Partner collection
    if not isinstance(partners, (list, tuple)):
        raise InputError("Partner records must be a list.")
    if len(partners) == 0:
        raise InputError("Partner record list is empty.")


def records_from_frame(data):
    """
    Converts an uploaded table of flattened records into record dicts.

    Args:
        data (pd.DataFrame): One row per record, one column per slot.

    Returns:
        list: Record dicts keyed by canonical slot names, NaN cells as None.
    """
    df = data.copy()
    df = df.rename(columns=lambda x: str(x).strip().lower().replace(" ", "_"))
    if df.columns.duplicated().any():
        # 'sId' and 'sid' collide once lowercased; keep the first filled cell
        merged = {}
        for col in dict.fromkeys(df.columns):
            same = df.loc[:, df.columns == col]
            merged[col] = same.bfill(axis=1).iloc[:, 0]
        df = pd.DataFrame(merged, index=df.index)
    if 'sid' in df.columns:
        # Legacy export, where an 'id' column is a row number
        df = df.drop(columns=[col for col in df.columns if col in RECORD_SLOTS])
        df = df.rename(columns={alias.lower(): slot for alias, slot in LEGACY_ALIASES.items()})

    columns = [col for col in RECORD_SLOTS if col in df.columns]
    if SUBJECT_KEY not in columns:
        raise InputError(f"Missing required column: {SUBJECT_KEY}")

    df = df[columns].astype(object).where(df[columns].notna(), None)
    return df.to_dict(orient='records')
