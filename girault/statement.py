from dataclasses import dataclass

from decree import Decree

PROTOCOL = "girault"
INPUTS = ["g", "N", "h", "u"]
CHALLENGES = ["e"]
CHALLENGE_BYTES = 128


@dataclass(frozen=True)
class GiraultStatement:
    """
    Public statement of a Girault identification proof.

    The prover knows x such that target = base^(-x) mod modulus. The order of
    the group generated by `base` does not need to be known to anyone.
    """

    modulus: int
    base: int
    target: int

    @classmethod
    def from_secret(cls, modulus, base, secret):
        """
        Build the statement for a secret logarithm.

        Args:
            modulus: Composite modulus N (base must be invertible mod N)
            base: Base g
            secret: Secret exponent x

        Returns:
            GiraultStatement: (N, g, g^(-x) mod N)
        """
        return cls(modulus=modulus, base=base, target=pow(base, -secret, modulus))


@dataclass(frozen=True)
class GiraultProof:
    commitment: int
    challenge: bytes
    response: int


def challenge_for(statement, commitment):
    """
    Run the Fiat-Shamir stage shared by prover and verifier.

    Args:
        statement: The GiraultStatement
        commitment: The prover's first message u = g^r mod N

    Returns:
        bytes: The challenge e (CHALLENGE_BYTES long)
    """
    transcript = Decree(PROTOCOL, INPUTS, CHALLENGES)
    transcript.add_serial("N", statement.modulus)
    transcript.add_serial("g", statement.base)
    transcript.add_serial("h", statement.target)
    transcript.add_serial("u", commitment)
    return transcript.get_challenge("e", CHALLENGE_BYTES)


def challenge_int(challenge):
    return int.from_bytes(challenge, "little")
