import secrets

from py_ecc.optimized_bn128 import curve_order

from schnorr.statement import SchnorrProof, challenge_for


class Prover:
    """
    Non-interactive Schnorr prover over BN254 G1.

    Commits to U = k*G, derives c from a Decree transcript over the inscribed
    statement and commitment, and answers s = k + c*x mod r.
    """

    def __init__(self, statement):
        """
        Args:
            statement: The SchnorrStatement being proven
        """
        self.statement = statement

    def prove(self, secret, nonce=None):
        """
        Generate a proof of knowledge of the discrete logarithm `secret`.

        Args:
            secret: x with public_key = x * generator
            nonce: Optional fixed k (tests only); drawn from `secrets` otherwise

        Returns:
            SchnorrProof: commitment and response
        """
        if self.statement.generator * secret != self.statement.public_key:
            raise ValueError("secret does not match the statement")

        k = nonce if nonce is not None else 1 + secrets.randbelow(curve_order - 1)
        commitment = self.statement.generator * k

        c = challenge_for(self.statement, commitment)
        s = (k + c * secret) % curve_order

        return SchnorrProof(commitment=commitment, response=s)
