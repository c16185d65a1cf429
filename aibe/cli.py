#!/usr/bin/env python3
# aibe command line
# -----------------------------------------------------
# Key generation, extraction, encryption, decryption and
# end-to-end burn / transfer proof demos.
#
# Usage example:
#   aibe keygen
#   aibe encrypt --id alice --value 35 > ct.b64
#   aibe decrypt --id alice --ciphertext "$(cat ct.b64)" --bound 100
#   aibe demo-transfer --balance 60 --amount 40

import argparse
import logging
import pickle
import sys
import time

from .bf_ibe import BFIbe, CipherText
from .codec import (
    decode_g1,
    decode_scalar,
    encode_g1,
    encode_g2,
    encode_scalar,
    from_base64,
    to_base64,
)
from .constants import DEFAULT_BOUND, DEFAULT_TRANSFER_BOUND, PUBLIC_PARAMS_FILE, SECRET_KEYS_FILE
from .errors import AibeError
from .rng import SystemRandomSource
from .utils import hash_to_g2, pedersen_commitment, scalar_to_int, to_scalar
from .zk.burn import BurnProver, BurnStatement, BurnVerifier, BurnWitness
from .zk.transfer import TransferProver, TransferStatement, TransferVerifier, TransferWitness


def _timed(label, fn, *args):
    t_start = time.time()
    result = fn(*args)
    print(f"[{label}]: {(time.time() - t_start) * 1000.0:.3f} ms")
    return result


# ============================
# Key files
# ============================

def save_keys_to_files(ibe, keys, public_path, secret_path):
    """Public file carries mpk only; the secret file must never leave the issuer."""
    with open(public_path, "wb") as f:
        pickle.dump({"mpk_bytes": encode_g1(keys.mpk, ibe.group)}, f)
    print(f"[✓] Public parameters saved to '{public_path}'")

    with open(secret_path, "wb") as f:
        pickle.dump({
            "msk_bytes": encode_scalar(keys.msk, ibe.group),
            "mpk_bytes": encode_g1(keys.mpk, ibe.group),
        }, f)
    print(f"[✓] Secret keys saved to '{secret_path}'")


def load_public(ibe, path):
    with open(path, "rb") as f:
        data = pickle.load(f)
    return decode_g1(data["mpk_bytes"], ibe.group)


def load_secret(ibe, path):
    with open(path, "rb") as f:
        data = pickle.load(f)
    return decode_scalar(data["msk_bytes"], ibe.group)


# ============================
# Commands
# ============================

def cmd_keygen(ibe, rng, args):
    print("[*] Generating master key pair...")
    keys = ibe.generate_key(rng)
    save_keys_to_files(ibe, keys, args.public, args.secret)
    print("[!] The secret key file must NEVER leave the key issuer")
    return 0


def cmd_extract(ibe, rng, args):
    msk = load_secret(ibe, args.secret)
    sk = ibe.extract(args.id, msk)
    print(encode_g2(sk, ibe.group).hex())
    return 0


def cmd_encrypt(ibe, rng, args):
    mpk = load_public(ibe, args.public)
    ct = ibe.encrypt(args.value, args.id, mpk, rng)
    print(to_base64(ct.to_bytes(ibe.group)))
    return 0


def cmd_decrypt(ibe, rng, args):
    msk = load_secret(ibe, args.secret)
    sk = ibe.extract(args.id, msk)
    ct = CipherText.from_bytes(from_base64(args.ciphertext), ibe.group)
    print(scalar_to_int(ibe.decrypt(ct, args.id, sk, args.bound)))
    return 0


def cmd_demo_burn(ibe, rng, args):
    G = ibe.group
    plain = to_scalar(args.value, G)
    print(f"[i] Ground truth: {args.value}")

    msk, mpk = _timed("IBE key gen", ibe.generate_key, rng)
    sk = _timed("IBE extract", ibe.extract, args.id, msk)
    ct = _timed("IBE encrypt", ibe.encrypt, plain, args.id, mpk, rng)
    result = _timed("IBE decrypt", ibe.decrypt, ct, args.id, sk, args.bound)
    print(f"[✓] Decrypted: {scalar_to_int(result)}")

    statement = BurnStatement.from_ciphertext(mpk, ct)
    witness = BurnWitness(b=plain, s=msk, h_id=hash_to_g2(args.id, G), sk_id=sk)
    proof = _timed("Burn prove", BurnProver(rng, G).generate_proof, statement, witness)
    _timed("Burn verify", BurnVerifier.verify_proof, statement, proof, G)

    print("Burn proof:")
    print(to_base64(proof.to_bytes(G)))
    print("Burn statement:")
    print(to_base64(statement.to_bytes(G)))
    return 0


def cmd_demo_transfer(ibe, rng, args):
    G = ibe.group
    b = to_scalar(args.balance, G)
    b_star = to_scalar(args.amount, G)
    b_prime = to_scalar(args.balance - args.amount, G)

    msk1, mpk1 = _timed("IBE key gen", ibe.generate_key, rng)
    _, mpk2 = ibe.generate_key(rng)
    sk1 = _timed("IBE extract", ibe.extract, args.sender, msk1)

    balance = ibe.encrypt(b, args.sender, mpk1, rng)
    correlated = _timed("IBE encrypt correlated", ibe.encrypt_correlated,
                        b_star, (args.sender, args.receiver), (mpk1, mpk2), rng)

    h1 = G.random_g1(rng)
    r_star, c_b_star = pedersen_commitment(b_star, h1, rng, G)
    r_prime, c_b_prime = pedersen_commitment(b_prime, h1, rng, G)

    statement = TransferStatement.build(ibe, h1, (mpk1, mpk2), balance, correlated, c_b_star, c_b_prime)
    h_id, h_id_bar = correlated.hashed_ids
    witness = TransferWitness(
        r=correlated.r, s=msk1, r_star=r_star, r_prime=r_prime,
        b_star=b_star, b_prime=b_prime, h_id=h_id, h_id_bar=h_id_bar, sk_id=sk1,
    )

    proof = _timed("Transfer prove", TransferProver(rng, G).generate_proof, statement, witness)
    _timed("Transfer verify", TransferVerifier.verify_proof, statement, proof, G)

    remaining = ibe.decrypt(CipherText(statement.c1_tilde, statement.c2_tilde), args.sender, sk1, args.bound)
    print(f"[✓] Remaining balance decrypts to {scalar_to_int(remaining)}")
    return 0


# ============================
# Main
# ============================

def build_parser():
    ap = argparse.ArgumentParser(prog="aibe", description="BF-IBE with burn/transfer proofs")
    ap.add_argument("--verbose", action="store_true", help="DEBUG logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("keygen", help="Generate a master key pair")
    p.add_argument("--public", default=PUBLIC_PARAMS_FILE)
    p.add_argument("--secret", default=SECRET_KEYS_FILE)
    p.set_defaults(func=cmd_keygen)

    p = sub.add_parser("extract", help="Print the hex identity secret key")
    p.add_argument("--secret", default=SECRET_KEYS_FILE)
    p.add_argument("--id", required=True)
    p.set_defaults(func=cmd_extract)

    p = sub.add_parser("encrypt", help="Encrypt a bounded integer to an identity")
    p.add_argument("--public", default=PUBLIC_PARAMS_FILE)
    p.add_argument("--id", required=True)
    p.add_argument("--value", type=int, required=True)
    p.set_defaults(func=cmd_encrypt)

    p = sub.add_parser("decrypt", help="Decrypt a base64 ciphertext")
    p.add_argument("--secret", default=SECRET_KEYS_FILE)
    p.add_argument("--id", required=True)
    p.add_argument("--ciphertext", required=True)
    p.add_argument("--bound", type=int, default=DEFAULT_BOUND)
    p.set_defaults(func=cmd_decrypt)

    p = sub.add_parser("demo-burn", help="Encrypt, decrypt, prove and verify a burn")
    p.add_argument("--id", default="zico")
    p.add_argument("--value", type=int, default=35)
    p.add_argument("--bound", type=int, default=DEFAULT_BOUND)
    p.set_defaults(func=cmd_demo_burn)

    p = sub.add_parser("demo-transfer", help="Prove and verify a confidential transfer")
    p.add_argument("--sender", default="zico1")
    p.add_argument("--receiver", default="zico2")
    p.add_argument("--balance", type=int, default=60)
    p.add_argument("--amount", type=int, default=40)
    p.add_argument("--bound", type=int, default=DEFAULT_TRANSFER_BOUND)
    p.set_defaults(func=cmd_demo_transfer)

    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    ibe = BFIbe()
    rng = SystemRandomSource()
    try:
        return args.func(ibe, rng, args)
    except (AibeError, OSError) as e:
        print(f"[!] Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
