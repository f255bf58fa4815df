import random
import sys

import pandas as pd

from breedcalc.pedigree.validation.validator import ANCESTOR_SLOTS, RECORD_SLOTS, SUBJECT_KEY


def generate_complex_pedigree(num_animals=100, num_founders=10, seed=None):
    """
    Generates a random, inbred pedigree.

    Returns:
        tuple: (pedigree, genders) where pedigree maps animal_id to
        (dam_id, sire_id) and genders maps animal_id to 'M' or 'F'.

    Raises:
        ValueError: With fewer than two founders, which leaves no sire.
    """
    if num_founders < 2:
        raise ValueError(f"Need at least two founders, got {num_founders}.")
    rng = random.Random(seed)
    pedigree = {}
    genders = {}

    # --- Generation 1: Founders ---
    for founder in range(1, num_founders + 1):
        animal_id = str(founder)
        pedigree[animal_id] = (None, None)
        # Alternate so both sexes exist among the founders
        genders[animal_id] = 'F' if founder % 2 else 'M'

    next_id = num_founders + 1

    # --- Subsequent Generations ---
    while next_id <= num_animals:
        available_dams = [i for i, sex in genders.items() if sex == 'F']
        available_sires = [i for i, sex in genders.items() if sex == 'M']

        dam = rng.choice(available_dams)
        sire = rng.choice(available_sires)

        animal_id = str(next_id)
        pedigree[animal_id] = (dam, sire)
        genders[animal_id] = rng.choice(['M', 'F'])
        next_id += 1

    return pedigree, genders


def flatten_record(pedigree, animal_id):
    """Builds the flattened record of one animal: itself plus three generations."""
    record = {SUBJECT_KEY: animal_id}
    for slot in ANCESTOR_SLOTS:
        parts = slot.split('_')
        child_slot = SUBJECT_KEY if len(parts) == 1 else '_'.join(parts[:-1])
        child_id = record.get(child_slot)
        parent_id = None
        if child_id is not None:
            dam_id, sire_id = pedigree.get(child_id, (None, None))
            parent_id = dam_id if parts[-1] == 'dam' else sire_id
        record[slot] = parent_id
    return record


def flatten_pedigree(pedigree):
    return [flatten_record(pedigree, animal_id) for animal_id in pedigree]


if __name__ == "__main__":
    # To run this from command line and save to a file:
    # python generate_pedigree.py 100 > flattened_pedigree_100.csv
    size = int(sys.argv[1]) if len(sys.argv) > 1 else 100
    ped, _ = generate_complex_pedigree(size)
    pd.DataFrame(flatten_pedigree(ped), columns=RECORD_SLOTS).to_csv(sys.stdout, index=False)
