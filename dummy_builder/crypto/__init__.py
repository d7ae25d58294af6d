"""Cryptographic utilities.

Uses blspy (fast C/assembly) when available, falls back to py_ecc (pure Python).
"""

import logging
import secrets
from typing import Optional

logger = logging.getLogger(__name__)

# Try to use blspy (fast) first, fall back to py_ecc (slow)
_USE_BLSPY = False
try:
    from blspy import (
        PrivateKey as BlsPrivateKey,
        G1Element,
        G2Element,
        AugSchemeMPL,
        PopSchemeMPL,
    )
    _USE_BLSPY = True
    logger.info("Using blspy for BLS cryptography (fast)")
except ImportError:
    from py_ecc.bls import G2ProofOfPossession as _py_ecc_bls
    logger.info("blspy not available, using py_ecc (slow) - install blspy for better performance")


def hash_tree_root(obj) -> bytes:
    """Compute the hash tree root of an SSZ object or return bytes directly.

    Args:
        obj: SSZ object with hash_tree_root() method, or 32-byte root

    Returns:
        32-byte hash tree root
    """
    if isinstance(obj, bytes):
        if len(obj) == 32:
            return obj
        raise ValueError(f"Expected 32-byte root, got {len(obj)} bytes")

    if hasattr(obj, 'hash_tree_root'):
        root = obj.hash_tree_root()
        if isinstance(root, bytes):
            return root
        return bytes(root)

    raise TypeError(f"Cannot compute hash_tree_root of {type(obj)}")


def compute_fork_data_root(current_version: bytes, genesis_validators_root: bytes) -> bytes:
    """Return the 32-byte fork data root for the current version and genesis validators root."""
    from dummy_builder.spec.types import ForkData, Root, Version

    return hash_tree_root(ForkData(
        current_version=Version(current_version),
        genesis_validators_root=Root(genesis_validators_root),
    ))


def compute_domain(
    domain_type: bytes,
    fork_version: Optional[bytes] = None,
    genesis_validators_root: Optional[bytes] = None,
) -> bytes:
    """Return the domain for signing.

    Args:
        domain_type: 4-byte domain type
        fork_version: 4-byte fork version (defaults to zeros)
        genesis_validators_root: 32-byte genesis validators root (defaults to zeros)

    Returns:
        32-byte domain
    """
    if fork_version is None:
        fork_version = b"\x00\x00\x00\x00"
    if genesis_validators_root is None:
        genesis_validators_root = b"\x00" * 32

    fork_data_root = compute_fork_data_root(fork_version, genesis_validators_root)
    return domain_type + fork_data_root[:28]


def compute_signing_root(obj, domain: bytes) -> bytes:
    """Compute the signing root for a message and domain.

    Args:
        obj: SSZ object or 32-byte root
        domain: 32-byte domain

    Returns:
        32-byte signing root
    """
    from dummy_builder.spec.types import SigningData, Root

    signing_data = SigningData(
        object_root=Root(hash_tree_root(obj)),
        domain=domain,
    )
    return hash_tree_root(signing_data)


def generate_privkey() -> int:
    """Generate a fresh random BLS private key."""
    ikm = secrets.token_bytes(32)
    if _USE_BLSPY:
        sk = AugSchemeMPL.key_gen(ikm)
        return int.from_bytes(bytes(sk), 'big')
    else:
        return _py_ecc_bls.KeyGen(ikm)


def sign(privkey: int, message: bytes) -> bytes:
    """Sign a message with a BLS private key."""
    if _USE_BLSPY:
        # Convert int to 32-byte big-endian, then to blspy PrivateKey
        privkey_bytes = privkey.to_bytes(32, 'big')
        sk = BlsPrivateKey.from_bytes(privkey_bytes)
        sig = PopSchemeMPL.sign(sk, message)
        return bytes(sig)
    else:
        return _py_ecc_bls.Sign(privkey, message)


def verify(pubkey: bytes, message: bytes, signature: bytes) -> bool:
    """Verify a BLS signature."""
    try:
        if _USE_BLSPY:
            pk = G1Element.from_bytes(pubkey)
            sig = G2Element.from_bytes(signature)
            return PopSchemeMPL.verify(pk, message, sig)
        else:
            return _py_ecc_bls.Verify(pubkey, message, signature)
    except (ValueError, TypeError, RuntimeError) as e:
        logger.debug(f"Signature verification failed to decode inputs: {e}")
        return False


def pubkey_from_privkey(privkey: int) -> bytes:
    """Derive public key from private key."""
    if _USE_BLSPY:
        privkey_bytes = privkey.to_bytes(32, 'big')
        sk = BlsPrivateKey.from_bytes(privkey_bytes)
        return bytes(sk.get_g1())
    else:
        return _py_ecc_bls.SkToPk(privkey)


__all__ = [
    "hash_tree_root",
    "compute_fork_data_root",
    "compute_domain",
    "compute_signing_root",
    "generate_privkey",
    "sign",
    "verify",
    "pubkey_from_privkey",
]
