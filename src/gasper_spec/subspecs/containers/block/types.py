"""Block-specific SSZ types."""

from gasper_spec.subspecs.chain.config import MAX_ATTESTATIONS, MAX_DEPOSITS
from gasper_spec.types import SSZList

from ..attestation import Attestation
from ..deposit import Deposit


class Attestations(SSZList[Attestation]):
    """Attestations carried in a block body."""

    ELEMENT_TYPE = Attestation
    LIMIT = int(MAX_ATTESTATIONS)


class Deposits(SSZList[Deposit]):
    """Deposits carried in a block body, in processing order."""

    ELEMENT_TYPE = Deposit
    LIMIT = int(MAX_DEPOSITS)
