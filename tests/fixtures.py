"""Small pedigrees for the unit tests."""

# Both parents of A and B are the same unrelated founders.
FULL_SIBS = [
    {"id": "A", "sire": "S", "dam": "D"},
    {"id": "B", "sire": "S", "dam": "D"},
]

# A and B share only their sire.
HALF_SIBS = [
    {"id": "A", "sire": "S", "dam": "D1"},
    {"id": "B", "sire": "S", "dam": "D2"},
]

# No ancestor in common.
UNRELATED = [
    {"id": "A", "sire": "S1", "dam": "D1", "sire_sire": "SS1"},
    {"id": "B", "sire": "S2", "dam": "D2", "dam_dam": "DD2"},
]

# Legacy field names. Sire B1 of the cow is itself inbred
# (its parents P1 and P2 are half sibs through M).
COW_INBRED_SIRE = {
    "id": 5, "sBirth": None, "remark": None,
    "fId": "B1", "mId": "B2",
    "ffId": "P1", "fmId": "P2", "mfId": "P1", "mmId": "P2",
    "fffId": "", "ffmId": "M", "fmfId": "", "fmmId": "M",
    "mffId": "", "mfmId": "M", "mmfId": "", "mmmId": "M",
    "sid": "C2",
}
BULL_INBRED_SIRE = {
    "id": 1, "sId": "C1", "sBirth": None,
    "fId": "B1", "mId": "",
    "ffId": "P1", "fmId": "P2", "mfId": "", "mmId": "",
    "fffId": "", "ffmId": "M", "fmfId": "", "fmmId": "",
    "mffId": "", "mfmId": "", "mmfId": "", "mmmId": "",
}

# Full four-generation records. Bull 50 is a full sib of cow 1; bull 51
# shares all eight of her great-grandparents but nothing closer.
COW_DEEP = {
    "sid": "1", "fId": "2", "mId": "3",
    "ffId": "4", "fmId": "5", "mfId": "6", "mmId": "7",
    "fffId": "8", "ffmId": "9", "fmfId": "10", "fmmId": "11",
    "mffId": "12", "mfmId": "13", "mmfId": "14", "mmmId": "15",
}
BULL_FULL_SIB = dict(COW_DEEP, sid=None, sId="50")
BULL_SHARED_GREAT_GRANDPARENTS = {
    "sId": "51", "fId": "17", "mId": "18",
    "ffId": "19", "fmId": "20", "mfId": "21", "mmId": "22",
    "fffId": "8", "ffmId": "9", "fmfId": "10", "fmmId": "11",
    "mffId": "12", "mfmId": "13", "mmfId": "14", "mmmId": "15",
}
