"""Access codes: short bearer capabilities for guest result retrieval.

Codes are 12 characters over [A-Za-z0-9], i.e. 62**12 (~3.2e21) values.
Uniqueness is not checked here; the evaluations table carries a unique
constraint and the store regenerates on conflict.
"""

import logging
import random
import string

logger = logging.getLogger(__name__)

ACCESS_CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
ACCESS_CODE_LENGTH = 12


def _build_rng() -> random.Random:
    rng = random.SystemRandom()
    try:
        rng.random()
    except NotImplementedError:
        logger.warning("No OS randomness source available; access codes use a non-cryptographic PRNG")
        return random.Random()
    return rng


_rng = _build_rng()


def generate_access_code(length: int = ACCESS_CODE_LENGTH) -> str:
    return "".join(_rng.choice(ACCESS_CODE_ALPHABET) for _ in range(length))
