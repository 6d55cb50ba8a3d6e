import log
from girault.statement import challenge_for, challenge_int

logger = log.get_logger(__name__)


class Verifier:
    """Non-interactive Girault verifier."""

    def verify(self, statement, proof):
        """
        Verify a Girault proof.

        Args:
            statement: The GiraultStatement
            proof: The GiraultProof

        Returns:
            bool: True if the proof is valid
        """
        N = statement.modulus
        # Degenerate values make the verification equation trivially true.
        # Group elements are compared as residues; z is an exponent.
        for name, value in (("u", proof.commitment), ("h", statement.target), ("g", statement.base)):
            if value % N in (0, 1):
                logger.debug("degenerate proof value", extra={"field": name})
                return False
        if proof.response in (0, 1):
            logger.debug("degenerate proof value", extra={"field": "z"})
            return False

        challenge = challenge_for(statement, proof.commitment)
        if challenge != proof.challenge:
            logger.debug("challenge mismatch")
            return False

        e = challenge_int(challenge)
        check = pow(statement.base, proof.response, N) * pow(statement.target, e, N) % N
        return check == proof.commitment % N
