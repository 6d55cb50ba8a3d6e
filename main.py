#!/usr/bin/env python3
"""
Decree Demo: protocol-enforcing Fiat-Shamir transcripts
"""

import secrets

import log
from decree import Decree
from errors import DecreeError
from girault.prover import Prover as GiraultProver
from girault.statement import GiraultStatement
from girault.verifier import Verifier as GiraultVerifier
from schnorr.prover import Prover as SchnorrProver
from schnorr.statement import SchnorrStatement
from schnorr.verifier import Verifier as SchnorrVerifier


def demo_girault():
    print("=== Girault Proof Demo ===")

    # Any odd modulus works for the demo; real deployments use an RSA modulus
    modulus = (secrets.randbits(512) | (1 << 511) | 1) * (secrets.randbits(512) | (1 << 511) | 1)
    secret = secrets.randbits(256)
    statement = GiraultStatement.from_secret(modulus, 2, secret)

    # Prove
    proof = GiraultProver(statement).prove(secret)

    # Verify
    result = GiraultVerifier().verify(statement, proof)
    print(f"Girault verification: {'PASS' if result else 'FAIL'}\n")


def demo_schnorr():
    print("=== Schnorr (BN254) Proof Demo ===")

    secret = 1 + secrets.randbelow(2**254)
    statement = SchnorrStatement.from_secret(secret)

    # Prove
    proof = SchnorrProver(statement).prove(secret)

    # Verify
    result = SchnorrVerifier().verify(statement, proof)
    print(f"Schnorr verification: {'PASS' if result else 'FAIL'}\n")


def demo_enforcement():
    print("=== Transcript Enforcement Demo ===")

    transcript = Decree("demo", ["a", "b"], ["x", "y"])
    transcript.add_serial("b", 2)
    transcript.add_serial("a", 1)

    # Out-of-order challenge is refused
    try:
        transcript.get_challenge("y")
    except DecreeError as e:
        print(f"Refused: {e}")

    x = transcript.get_challenge("x")
    y = transcript.get_challenge("y")
    print(f"x = {x.hex()}")
    print(f"y = {y.hex()}")

    # Second stage on the same transcript
    transcript.continue_with(["c"], ["z"])
    try:
        transcript.get_challenge("z")
    except DecreeError as e:
        print(f"Refused: {e}")
    transcript.add_serial("c", b"stage two")
    print(f"z = {transcript.get_challenge('z').hex()}\n")


if __name__ == "__main__":
    log.configure()
    print("Running Decree demonstrations...\n")

    try:
        demo_girault()
    except Exception as e:
        print(f"Girault demo failed: {e}\n")

    try:
        demo_schnorr()
    except Exception as e:
        print(f"Schnorr demo failed: {e}\n")

    try:
        demo_enforcement()
    except Exception as e:
        print(f"Enforcement demo failed: {e}\n")

    print("Demo complete!")
