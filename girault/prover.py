import secrets

from girault.statement import CHALLENGE_BYTES, GiraultProof, challenge_for, challenge_int


class Prover:
    """
    Non-interactive Girault prover.

    The prover commits to u = g^r mod N, derives the challenge e from a Decree
    transcript over (N, g, h, u), and answers z = r + x*e over the integers.
    """

    def __init__(self, statement):
        """
        Args:
            statement: The GiraultStatement being proven
        """
        self.statement = statement

    def randomizer_bits(self):
        # r must statistically hide x*e, which is up to |N| + |e| bits
        return self.statement.modulus.bit_length() + 8 * CHALLENGE_BYTES + 128

    def prove(self, secret, randomizer=None):
        """
        Generate a proof of knowledge of `secret`.

        Args:
            secret: x with h = g^(-x) mod N
            randomizer: Optional fixed r (tests only); drawn from `secrets` otherwise

        Returns:
            GiraultProof: commitment, challenge bytes and response
        """
        statement = self.statement
        if pow(statement.base, secret, statement.modulus) * statement.target % statement.modulus != 1:
            raise ValueError("secret does not match the statement")

        r = randomizer if randomizer is not None else secrets.randbits(self.randomizer_bits())
        u = pow(statement.base, r, statement.modulus)

        challenge = challenge_for(statement, u)
        z = r + secret * challenge_int(challenge)

        return GiraultProof(commitment=u, challenge=challenge, response=z)
