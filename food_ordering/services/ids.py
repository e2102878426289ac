"""Short prefixed identifiers (``c_``, ``l_``, ``ord_``)."""

import uuid
from typing import Container

CART_PREFIX = "c_"
LINE_PREFIX = "l_"
ORDER_PREFIX = "ord_"


def generate_id(prefix: str, length: int = 6, taken: Container[str] = ()) -> str:
    """
    Generate ``prefix`` followed by ``length`` random hex characters.

    Ids only need to be unique within the process, so a candidate found
    in ``taken`` is simply redrawn.
    """
    while True:
        candidate = f"{prefix}{uuid.uuid4().hex[:length]}"
        if candidate not in taken:
            return candidate
