from dataclasses import dataclass

from py_ecc.optimized_bn128 import curve_order

from decree import Decree
from inscribe import SERIALIZE, inscribable, inscribe_field
from schnorr.points import G1Point

PROTOCOL = "schnorr-bn254"
INPUTS = ["statement", "commitment"]
CHALLENGES = ["c"]
CONTEXT_VERSION = b"decree/schnorr-bn254/v1"


@inscribable(additional="context")
@dataclass(frozen=True)
class SchnorrStatement:
    """
    Knowledge of x with public_key = x * generator over BN254 G1.

    Inscribed with both points recursively and the protocol version as
    additional context, so a statement for another protocol version (or any
    other type holding the same two points) never shares an inscription.
    """

    generator: G1Point
    public_key: G1Point
    curve: str = inscribe_field(SERIALIZE, default="bn254")

    @classmethod
    def from_secret(cls, secret, generator=None):
        generator = generator or G1Point.generator()
        return cls(generator=generator, public_key=generator * secret)

    def context(self):
        return CONTEXT_VERSION


@dataclass(frozen=True)
class SchnorrProof:
    commitment: G1Point
    response: int


def challenge_for(statement, commitment):
    """
    Run the Fiat-Shamir stage shared by prover and verifier.

    Args:
        statement: The SchnorrStatement
        commitment: The prover's first message U = k * G

    Returns:
        int: The challenge scalar c in [0, curve_order)
    """
    transcript = Decree(PROTOCOL, INPUTS, CHALLENGES)
    transcript.add("commitment", commitment)
    transcript.add("statement", statement)
    return transcript.get_challenge_scalar("c", curve_order)
