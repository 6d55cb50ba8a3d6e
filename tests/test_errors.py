import pytest

import errors
from errors import DecreeError, DecreeErrorCode


@pytest.mark.parametrize(
    "cls,code",
    [
        (errors.SpecError, DecreeErrorCode.SPEC),
        (errors.UnspecifiedInput, DecreeErrorCode.UNSPECIFIED_INPUT),
        (errors.DuplicateInput, DecreeErrorCode.DUPLICATE_INPUT),
        (errors.StageClosed, DecreeErrorCode.STAGE_CLOSED),
        (errors.IncompleteInputs, DecreeErrorCode.INCOMPLETE_INPUTS),
        (errors.UnspecifiedChallenge, DecreeErrorCode.UNSPECIFIED_CHALLENGE),
        (errors.StageComplete, DecreeErrorCode.STAGE_COMPLETE),
        (errors.StageIncomplete, DecreeErrorCode.STAGE_INCOMPLETE),
        (errors.ContextError, DecreeErrorCode.CONTEXT),
        (errors.SerializationError, DecreeErrorCode.SERIALIZATION),
        (errors.ChallengeLengthError, DecreeErrorCode.CHALLENGE_LENGTH),
        (errors.ConfigError, DecreeErrorCode.CONFIG),
    ],
)
def test_codes(cls, code):
    err = cls("boom", {"label": "a"})
    assert isinstance(err, DecreeError)
    assert err.code == code.value
    assert str(err) == f"[{code.value}] boom"
    assert err.to_dict() == {"code": code.value, "message": "boom", "data": {"label": "a"}, "retryable": False}


def test_raise_and_chain():
    with pytest.raises(errors.ContextError) as info:
        try:
            raise KeyError("p")
        except KeyError as exc:
            raise errors.ContextError("missing parameter") from exc
    assert isinstance(info.value.__cause__, KeyError)
    assert info.value.args == ("missing parameter",)
