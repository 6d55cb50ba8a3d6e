"""
Decree: Fiat-Shamir transcripts that enforce a declared protocol.

A `Decree` wraps a sponge `Transcript` and a per-stage specification listing
every input the stage must absorb and every challenge it may draw, in order.
Inputs are buffered as canonical bytes and only committed to the transcript
when the first challenge of the stage is requested, in a fixed order that
does not depend on the order the caller supplied them. Omitted inputs,
repeated inputs, extra inputs and out-of-order challenges are all rejected
before the transcript is touched.
"""

from __future__ import annotations

import enum
from collections.abc import Set
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import canonical
import log
from errors import (
    ChallengeLengthError,
    DuplicateInput,
    IncompleteInputs,
    SpecError,
    StageClosed,
    StageComplete,
    StageIncomplete,
    UnspecifiedChallenge,
    UnspecifiedInput,
)
from inscribe import inscribe
from settings import DecreeSettings, get_settings
from transcript import Transcript

logger = log.get_logger(__name__)

# Challenge lengths in bytes; protocol constants, not settings.
DEFAULT_CHALLENGE_BYTES = 32
SCALAR_CHALLENGE_BYTES = 64


class StageState(enum.Enum):
    COLLECTING_INPUTS = "collecting_inputs"
    EXTRACTING = "extracting"
    STAGE_COMPLETE = "stage_complete"


def _check_labels(kind: str, labels: Iterable[str]) -> Tuple[str, ...]:
    if isinstance(labels, (str, bytes)):
        raise SpecError(f"{kind} labels must be a sequence of strings, not a single string", {"kind": kind})
    if isinstance(labels, Set):
        # challenge draw order comes from the sequence, which a set does not have
        raise SpecError(f"{kind} labels must be an ordered sequence, not a set", {"kind": kind})
    out = tuple(labels)
    if not out:
        raise SpecError(f"must specify at least one {kind}", {"kind": kind})
    for label in out:
        if not isinstance(label, str) or not label:
            raise SpecError(f"{kind} labels must be non-empty strings", {"kind": kind, "label": repr(label)})
    seen = set()
    dupes = []
    for label in out:
        if label in seen and label not in dupes:
            dupes.append(label)
        seen.add(label)
    if dupes:
        raise SpecError(f"{kind} labels must be distinct", {"kind": kind, "duplicates": dupes})
    return out


@dataclass(frozen=True)
class StageSpec:
    """
    The declared inputs and challenges of one protocol stage.

    `inputs` and `challenges` keep declaration order. Challenges are drawn in
    exactly that order. Inputs are committed in `flush_order`, the sorted
    label order, so that the transcript never depends on how the caller
    listed or supplied them.
    """

    protocol_mark: str
    inputs: Tuple[str, ...]
    challenges: Tuple[str, ...]

    @classmethod
    def build(cls, protocol_mark: str, inputs: Iterable[str], challenges: Iterable[str]) -> "StageSpec":
        """
        Validate label sets and build a spec.

        Raises:
            SpecError: on empty sets, non-string or empty labels, or duplicates
        """
        if not isinstance(protocol_mark, str) or not protocol_mark:
            raise SpecError("protocol mark must be a non-empty string", {"mark": repr(protocol_mark)})
        return cls(
            protocol_mark=protocol_mark,
            inputs=_check_labels("input", inputs),
            challenges=_check_labels("challenge", challenges),
        )

    @property
    def flush_order(self) -> Tuple[str, ...]:
        return tuple(sorted(self.inputs))


class Decree:
    """
    Protocol-enforcing Fiat-Shamir transcript.

    Per stage the life cycle is COLLECTING_INPUTS -> EXTRACTING ->
    STAGE_COMPLETE; `continue_with` starts the next stage on the same
    underlying transcript, so all earlier history keeps influencing later
    challenges.

    Every failed call leaves the Decree exactly as it was. A Decree is a
    single-owner object: it holds no locks, and callers that share one
    between threads must serialize access themselves.
    """

    def __init__(self, protocol_mark, inputs, challenges, *, transcript=None, settings: Optional[DecreeSettings] = None):
        """
        Start a transcript at its first stage.

        Args:
            protocol_mark: Protocol name; seeds the transcript
            inputs: Input labels the stage requires
            challenges: Challenge labels, in the order they will be drawn
            transcript: Optional fresh transcript object (must provide
                append_message and challenge_bytes); defaults to
                Transcript(protocol_mark)
            settings: Optional settings for the challenge length guard
                (defaults to the process settings)
        """
        self._stage = StageSpec.build(protocol_mark, inputs, challenges)
        self._settings = settings or get_settings()
        self._transcript = transcript if transcript is not None else Transcript(protocol_mark)
        self._stage_index = 0
        self._pending: Dict[str, bytes] = {}
        self._flushed = False
        self._next_challenge = 0
        logger.debug(
            "decree created",
            extra={"mark": protocol_mark, "inputs": list(self._stage.inputs), "challenges": list(self._stage.challenges)},
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def protocol_mark(self) -> str:
        return self._stage.protocol_mark

    @property
    def stage(self) -> StageSpec:
        return self._stage

    @property
    def stage_index(self) -> int:
        return self._stage_index

    @property
    def state(self) -> StageState:
        if not self._flushed:
            return StageState.COLLECTING_INPUTS
        if self._next_challenge < len(self._stage.challenges):
            return StageState.EXTRACTING
        return StageState.STAGE_COMPLETE

    def missing_inputs(self) -> Tuple[str, ...]:
        if self._flushed:
            return ()
        return tuple(label for label in self._stage.inputs if label not in self._pending)

    def remaining_challenges(self) -> Tuple[str, ...]:
        return self._stage.challenges[self._next_challenge:]

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def add(self, label: str, value: Any) -> None:
        """
        Supply an input through its inscription.

        Args:
            label: An input label of the current stage
            value: An inscribable value

        Raises:
            StageClosed, UnspecifiedInput, DuplicateInput: see `_check_input`
            ContextError: if the value's additional context fails
        """
        self._check_input(label)
        self._pending[label] = inscribe(value).to_bytes()

    def add_serial(self, label: str, value: Any) -> None:
        """
        Supply an input through its canonical serialization.

        Args:
            label: An input label of the current stage
            value: Any canonically serializable value (see canonical.py)

        Raises:
            StageClosed, UnspecifiedInput, DuplicateInput: see `_check_input`
            SerializationError: if the value has no canonical encoding
        """
        self._check_input(label)
        self._pending[label] = canonical.to_bytes(value)

    def _check_input(self, label: str) -> None:
        if self._flushed:
            raise StageClosed(
                "cannot add inputs after the stage committed them",
                {"label": label, "stage": self._stage_index},
            )
        if label not in self._stage.inputs:
            raise UnspecifiedInput("input label not in stage", {"label": label, "stage": self._stage_index})
        if label in self._pending:
            raise DuplicateInput("input label already used", {"label": label, "stage": self._stage_index})

    # ------------------------------------------------------------------
    # Challenges
    # ------------------------------------------------------------------

    def get_challenge(self, label: str, out_len: Optional[int] = None) -> bytes:
        """
        Draw the next challenge of the stage.

        On the first call of a stage, all pending inputs are committed to the
        transcript in the stage's flush order.

        Args:
            label: Must equal the next undrawn challenge label
            out_len: Number of bytes (defaults to DEFAULT_CHALLENGE_BYTES)

        Returns:
            bytes: The challenge

        Raises:
            ChallengeLengthError: if out_len is out of range
            StageComplete: if every challenge was already drawn
            UnspecifiedChallenge: if label is not the next challenge
            IncompleteInputs: if inputs are still missing
        """
        n = DEFAULT_CHALLENGE_BYTES if out_len is None else out_len
        if isinstance(n, bool) or not isinstance(n, int) or not (1 <= n <= self._settings.max_challenge_bytes):
            raise ChallengeLengthError(
                "challenge length out of range",
                {"label": label, "out_len": repr(n), "max": self._settings.max_challenge_bytes},
            )

        challenges = self._stage.challenges
        if self._next_challenge >= len(challenges):
            raise StageComplete("no remaining challenges", {"label": label, "stage": self._stage_index})
        expected = challenges[self._next_challenge]
        if label != expected:
            if label not in challenges:
                msg = "requested challenge not in spec"
            else:
                msg = "challenge order incorrect"
            raise UnspecifiedChallenge(msg, {"label": label, "expected": expected, "stage": self._stage_index})

        if not self._flushed:
            missing = self.missing_inputs()
            if missing:
                raise IncompleteInputs(
                    "missing transcript inputs", {"missing": list(missing), "stage": self._stage_index}
                )
            self._flush()

        out = self._transcript.challenge_bytes(label, n)
        self._next_challenge += 1
        logger.debug("challenge drawn", extra={"label": label, "out_len": n, "stage": self._stage_index})
        return out

    def get_challenge_scalar(self, label: str, modulus: int, width: int = SCALAR_CHALLENGE_BYTES) -> int:
        """
        Draw the next challenge as an integer in [0, modulus).

        Reads `width` bytes big-endian, so the reduction bias is negligible
        for moduli well below 8 * width bits.
        """
        if isinstance(modulus, bool) or not isinstance(modulus, int) or modulus < 2:
            raise ValueError(f"modulus must be an integer >= 2, got {modulus!r}")
        raw = self.get_challenge(label, width)
        return int.from_bytes(raw, "big") % modulus

    def _flush(self) -> None:
        order = self._stage.flush_order
        for input_label in order:
            self._transcript.append_message(input_label, self._pending[input_label])
        self._flushed = True
        logger.debug("inputs committed", extra={"labels": list(order), "stage": self._stage_index})

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def continue_with(self, inputs: Union[StageSpec, Iterable[str]], challenges: Optional[Iterable[str]] = None) -> None:
        """
        Start the next stage on the same transcript.

        Args:
            inputs: Input labels of the new stage, or a prebuilt StageSpec
                carrying the same protocol mark
            challenges: Challenge labels of the new stage, in draw order
                (omitted when a StageSpec is given)

        Raises:
            StageIncomplete: if the current stage still has undrawn challenges
            SpecError: if the new labels are invalid, or the StageSpec is for
                another protocol
        """
        if self.state is not StageState.STAGE_COMPLETE:
            raise StageIncomplete(
                "cannot continue until all challenges generated",
                {"remaining": list(self.remaining_challenges()), "stage": self._stage_index},
            )
        if isinstance(inputs, StageSpec):
            spec = inputs
            if challenges is not None:
                raise SpecError("challenges are taken from the StageSpec", {"stage": self._stage_index + 1})
            if spec.protocol_mark != self._stage.protocol_mark:
                raise SpecError(
                    "stage spec belongs to another protocol",
                    {"expected": self._stage.protocol_mark, "mark": spec.protocol_mark},
                )
        else:
            if challenges is None:
                raise SpecError("challenge labels are required", {"stage": self._stage_index + 1})
            spec = StageSpec.build(self._stage.protocol_mark, inputs, challenges)

        self._stage = spec
        self._stage_index += 1
        self._pending = {}
        self._flushed = False
        self._next_challenge = 0
        logger.debug(
            "stage continued",
            extra={"stage": self._stage_index, "inputs": list(spec.inputs), "challenges": list(spec.challenges)},
        )


__all__ = ["Decree", "StageSpec", "StageState", "DEFAULT_CHALLENGE_BYTES", "SCALAR_CHALLENGE_BYTES"]
