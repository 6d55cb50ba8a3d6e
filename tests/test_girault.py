from dataclasses import replace

import pytest

import settings
from girault.prover import Prover
from girault.statement import CHALLENGE_BYTES, GiraultProof, GiraultStatement, challenge_for
from girault.verifier import Verifier

# p = NextPrime(SHA3-512('DECREE')), q = NextPrime(SHA3-512('INSCRIBE'))
P = int(
    "e955c307804136f22408b416ebc081aec8d940e1ebd790cbe128485b15a8064d"
    "5015e2b4c0058d403670a8cfa00fe1ad866312656e740e58b566fa4eddde2883", 16
)
Q = int(
    "d608e1552a96613570afb9e7291b29162ad18868e2f7aedeba2b321d13ab2b79"
    "99a1e449e433c5947af5194471e84ce0d34b30b761004c8efdad598771b37e13", 16
)
SECRET = 8675309


@pytest.fixture
def statement():
    return GiraultStatement.from_secret(P * Q, 2, SECRET)


def test_prove_and_verify(statement):
    proof = Prover(statement).prove(SECRET)
    assert len(proof.challenge) == CHALLENGE_BYTES
    assert Verifier().verify(statement, proof)


def test_proof_is_deterministic_for_fixed_randomizer(statement):
    a = Prover(statement).prove(SECRET, randomizer=123456789)
    b = Prover(statement).prove(SECRET, randomizer=123456789)
    assert a == b


def test_wrong_secret_is_refused(statement):
    with pytest.raises(ValueError):
        Prover(statement).prove(SECRET + 1)


def test_tampered_response_fails(statement):
    proof = Prover(statement).prove(SECRET)
    assert not Verifier().verify(statement, replace(proof, response=proof.response + 1))


def test_challenge_binds_statement(statement):
    proof = Prover(statement).prove(SECRET)
    other = replace(statement, base=3)
    assert challenge_for(other, proof.commitment) != proof.challenge
    assert not Verifier().verify(other, proof)


def test_degenerate_commitment_rejected(statement):
    proof = Prover(statement).prove(SECRET)
    assert not Verifier().verify(statement, replace(proof, commitment=1))


def test_unreduced_identity_values_rejected():
    # g, h and u are all 1 mod N, so g^z * h^e == u holds for any z and e
    N = P * Q
    trivial = GiraultStatement(modulus=N, base=N + 1, target=N + 1)
    commitment = 2 * N + 1
    forged = GiraultProof(commitment=commitment, challenge=challenge_for(trivial, commitment), response=5)
    assert not Verifier().verify(trivial, forged)


@pytest.mark.parametrize("offset", [1, 0])
def test_degenerate_commitment_rejected_modulo_n(statement, offset, caplog):
    proof = Prover(statement).prove(SECRET)
    N = statement.modulus
    caplog.set_level("DEBUG", logger="girault.verifier")
    assert not Verifier().verify(statement, replace(proof, commitment=N + offset))
    assert any(getattr(r, "field", None) == "u" for r in caplog.records)


def test_proof_survives_environment_changes(statement, monkeypatch):
    proof = Prover(statement).prove(SECRET, randomizer=123456789)

    monkeypatch.setenv("DECREE_INSCRIPTION_DIGEST_BYTES", "32")
    monkeypatch.setenv("DECREE_CHALLENGE_BYTES", "48")
    monkeypatch.setenv("DECREE_CHALLENGE_BYTES_WIDE", "48")
    settings.reset_settings()
    assert Verifier().verify(statement, proof)
    assert Prover(statement).prove(SECRET, randomizer=123456789) == proof
