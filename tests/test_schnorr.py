from dataclasses import replace

import pytest
from py_ecc.optimized_bn128 import G1, curve_order, multiply

import settings
from inscribe import inscribe
from schnorr.points import G1Point
from schnorr.prover import Prover
from schnorr.statement import SchnorrStatement, challenge_for
from schnorr.verifier import Verifier

SECRET = 0x1234567890ABCDEF


@pytest.fixture(scope="module")
def statement():
    return SchnorrStatement.from_secret(SECRET)


def test_point_inscription_ignores_jacobian_representation():
    p = G1Point.generator() * 5
    affine = G1Point.from_affine(*p.to_affine())
    assert p == affine
    assert inscribe(p) == inscribe(affine)
    assert inscribe(p).mark == "bn254.G1"


def test_identity_inscription():
    identity = G1Point.identity()
    assert identity.to_affine() is None
    assert inscribe(identity) != inscribe(G1Point.generator())
    assert G1Point.generator() * curve_order == identity


def test_off_curve_point_rejected():
    with pytest.raises(ValueError):
        G1Point.from_affine(1, 3)


def test_point_arithmetic_matches_py_ecc():
    assert (G1Point.generator() * 7).point == multiply(G1, 7)
    g = G1Point.generator()
    assert g * 3 + -(g * 3) == G1Point.identity()


def test_statement_inscription_has_context(statement):
    i = inscribe(statement)
    assert i.mark == "SchnorrStatement"
    assert i == inscribe(SchnorrStatement.from_secret(SECRET))
    assert i != inscribe(replace(statement, curve="bn254-test"))


def test_prove_and_verify(statement):
    proof = Prover(statement).prove(SECRET)
    assert Verifier().verify(statement, proof)


def test_fixed_nonce_is_deterministic(statement):
    a = Prover(statement).prove(SECRET, nonce=99)
    b = Prover(statement).prove(SECRET, nonce=99)
    assert a == b
    assert a.commitment == G1Point.generator() * 99


def test_tampered_proofs_fail(statement):
    proof = Prover(statement).prove(SECRET, nonce=1234)
    assert not Verifier().verify(statement, replace(proof, response=(proof.response + 1) % curve_order))
    assert not Verifier().verify(statement, replace(proof, commitment=proof.commitment + G1Point.generator()))
    assert not Verifier().verify(statement, replace(proof, commitment=G1Point.identity()))
    assert not Verifier().verify(statement, replace(proof, response=curve_order))


def test_challenge_binds_public_key(statement):
    commitment = G1Point.generator() * 77
    other = SchnorrStatement.from_secret(SECRET + 1)
    assert challenge_for(statement, commitment) != challenge_for(other, commitment)


def test_wrong_secret_is_refused(statement):
    with pytest.raises(ValueError):
        Prover(statement).prove(SECRET + 1)


def test_proof_survives_environment_changes(statement, monkeypatch):
    proof = Prover(statement).prove(SECRET, nonce=4242)
    statement_digest = inscribe(statement).digest

    monkeypatch.setenv("DECREE_INSCRIPTION_DIGEST_BYTES", "32")
    monkeypatch.setenv("DECREE_CHALLENGE_BYTES", "48")
    monkeypatch.setenv("DECREE_CHALLENGE_BYTES_WIDE", "48")
    settings.reset_settings()
    assert inscribe(statement).digest == statement_digest
    assert Verifier().verify(statement, proof)
    assert Prover(statement).prove(SECRET, nonce=4242) == proof
