from py_ecc.optimized_bn128 import curve_order

from schnorr.points import G1Point
from schnorr.statement import challenge_for


class Verifier:
    """Non-interactive Schnorr verifier over BN254 G1."""

    def verify(self, statement, proof):
        """
        Verify a Schnorr proof.

        Args:
            statement: The SchnorrStatement
            proof: The SchnorrProof

        Returns:
            bool: True if s*G == U + c*P
        """
        if not (0 <= proof.response < curve_order):
            return False
        if proof.commitment == G1Point.identity():
            return False

        c = challenge_for(statement, proof.commitment)
        lhs = statement.generator * proof.response
        rhs = proof.commitment + statement.public_key * c
        return lhs == rhs
