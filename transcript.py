import hashlib
import struct


def _frame(data):
    """
    Length-prefix a byte string so consecutive absorbs cannot be re-split.

    Args:
        data: Bytes to frame

    Returns:
        8-byte big-endian length followed by the data
    """
    return struct.pack(">Q", len(data)) + data


def _as_bytes(label):
    if isinstance(label, str):
        return label.encode("utf-8")
    if isinstance(label, (bytes, bytearray)):
        return bytes(label)
    raise TypeError(f"transcript labels must be str or bytes, not {type(label).__name__}")


class Transcript:
    """
    Append-only sponge transcript for the Fiat-Shamir transform.

    This class keeps a running SHA-256 state over every labeled message and
    every challenge request. Challenges are squeezed with SHAKE-256 from the
    current state, and each extraction is absorbed back into the state, so the
    output of a challenge depends on everything that happened before it,
    including earlier challenges. Prover and verifier that perform the same
    sequence of calls obtain the same challenges.

    The transcript does not know which messages a protocol requires; that is
    enforced one level up by `decree.Decree`.
    """

    def __init__(self, label):
        """
        Initialize a new transcript with a protocol label.

        Args:
            label: A string (or bytes) identifying the protocol instance
        """
        self.state = hashlib.sha256(_frame(b"decree.init") + _frame(_as_bytes(label))).digest()

    def append_message(self, message_label, message_data):
        """
        Append a labeled message to the transcript.

        Args:
            message_label: A label for this message (e.g., "round1-commitment")
            message_data: The canonical bytes of the message
        """
        if not isinstance(message_data, (bytes, bytearray)):
            raise TypeError("transcript messages must be bytes; serialize them first")
        self._update_state(b"msg", _as_bytes(message_label), bytes(message_data))

    def challenge_bytes(self, label, n):
        """
        Squeeze `n` challenge bytes bound to the current transcript state.

        Args:
            label: A label for this challenge (e.g., "beta")
            n: Number of bytes to produce

        Returns:
            bytes: The challenge bytes
        """
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            raise ValueError(f"challenge length must be a positive integer, got {n!r}")

        label_bytes = _as_bytes(label)
        xof = hashlib.shake_256()
        xof.update(self.state)
        xof.update(_frame(label_bytes))
        xof.update(struct.pack(">Q", n))
        challenge = xof.digest(n)

        # The request and its output become part of the history
        self._update_state(b"chal", label_bytes, challenge)

        return challenge

    def _update_state(self, kind, label, data):
        """
        Update the internal transcript state.

        Args:
            kind: Short tag separating messages from challenges
            label: Label bytes
            data: Payload bytes
        """
        # Update state: H(state || kind || len(label) || label || len(data) || data)
        hasher = hashlib.sha256()
        hasher.update(self.state)
        hasher.update(_frame(kind))
        hasher.update(_frame(label))
        hasher.update(_frame(data))
        self.state = hasher.digest()
