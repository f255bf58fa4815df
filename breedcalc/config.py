import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY')
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # Calculation defaults. The memo scope is a deployment choice and is never
    # taken from a request.
    BREEDCALC_PATH_MODE = os.environ.get('BREEDCALC_PATH_MODE', 'full')
    BREEDCALC_MEMO_SCOPE = os.environ.get('BREEDCALC_MEMO_SCOPE', 'unit')
    BREEDCALC_ATTACH_POLICY = os.environ.get('BREEDCALC_ATTACH_POLICY', 'first-wins')
    BREEDCALC_UNIT = os.environ.get('BREEDCALC_UNIT', 'batch')
