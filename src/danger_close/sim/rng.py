from __future__ import annotations

import hashlib
from random import Random


def derive_seed(base_seed: int, *, action_seq: int, stream: str, purpose: str) -> int:
    payload = f"{base_seed}|{action_seq}|{stream}|{purpose}".encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=8).digest()
    return int.from_bytes(digest, "big")


def stream_rng(base_seed: int, *, action_seq: int, stream: str, purpose: str) -> Random:
    return Random(derive_seed(base_seed, action_seq=action_seq, stream=stream, purpose=purpose))
