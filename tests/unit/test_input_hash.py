"""
Input Hash Codec Unit Tests
Tests for prover/input_hash.py

Tests:
- exact preimage layout (order, widths, endianness)
- padding law for commitments
- determinism and sensitivity to every committed field
- rejection of commitments wider than 32 bytes
"""
import pytest

from core.crypto.hashing import keccak256
from core.schemas.errors import HashEncodingException
from core.schemas.params import ProofParameters
from prover.input_hash import (
    compute_input_hash,
    encode_input_hash_preimage,
    with_input_hash,
)


def _params(**overrides) -> ProofParameters:
    data = {
        "start_index": 1,
        "pre_root": 0x0102,
        "post_root": 0xABCDEF,
        "id_comms": [5, 6],
        "merkle_proofs": [[0], [0]],
    }
    data.update(overrides)
    return ProofParameters(**data)


class TestPreimageLayout:
    """Tests for encode_input_hash_preimage()."""

    def test_exact_layout(self):
        """startIndex (4 bytes) || minimal roots || 32-byte commitments."""
        expected = (
            b"\x00\x00\x00\x01"
            + b"\x01\x02"
            + b"\xab\xcd\xef"
            + (5).to_bytes(32, "big")
            + (6).to_bytes(32, "big")
        )
        assert encode_input_hash_preimage(_params()) == expected

    def test_zero_roots_encode_to_nothing(self):
        preimage = encode_input_hash_preimage(_params(pre_root=0, post_root=0, id_comms=[]))
        assert preimage == b"\x00\x00\x00\x01"

    def test_roots_are_not_padded(self):
        preimage = encode_input_hash_preimage(_params(pre_root=1, post_root=1, id_comms=[]))
        assert preimage == b"\x00\x00\x00\x01\x01\x01"

    def test_max_start_index(self):
        preimage = encode_input_hash_preimage(_params(start_index=2**32 - 1, id_comms=[]))
        assert preimage[:4] == b"\xff\xff\xff\xff"


class TestPaddingLaw:
    """Commitments are left-padded to exactly 32 bytes."""

    def _comm_bytes(self, value: int) -> bytes:
        preimage = encode_input_hash_preimage(
            _params(pre_root=0, post_root=0, id_comms=[value])
        )
        return preimage[4:]

    def test_thirty_byte_commitment_gets_two_zero_bytes(self):
        value = (1 << 232) + 0x1234
        minimal = value.to_bytes(30, "big")
        assert minimal[0] != 0

        encoded = self._comm_bytes(value)

        assert len(encoded) == 32
        assert encoded == b"\x00\x00" + minimal

    def test_thirty_two_byte_commitment_unchanged(self):
        value = (1 << 255) | 0xFF
        encoded = self._comm_bytes(value)

        assert encoded == value.to_bytes(32, "big")

    def test_zero_commitment_is_all_zero(self):
        assert self._comm_bytes(0) == b"\x00" * 32

    def test_oversized_commitment_rejected(self):
        with pytest.raises(HashEncodingException) as exc_info:
            encode_input_hash_preimage(_params(id_comms=[5, 1 << 256]))

        assert exc_info.value.details["field_path"] == "idComms[1]"


class TestComputeInputHash:
    """Tests for compute_input_hash()."""

    def test_is_keccak_of_preimage_big_endian(self):
        params = _params()
        digest = keccak256(encode_input_hash_preimage(params))

        assert compute_input_hash(params) == int.from_bytes(digest, "big")

    def test_deterministic(self):
        assert compute_input_hash(_params()) == compute_input_hash(_params())

    def test_ignores_merkle_proofs_and_input_hash(self):
        base = compute_input_hash(_params())
        other = compute_input_hash(_params(merkle_proofs=[[9, 9]], input_hash=123))

        assert base == other

    @pytest.mark.parametrize(
        "overrides",
        [
            {"start_index": 2},
            {"pre_root": 0x0103},
            {"post_root": 0xABCDEE},
            {"id_comms": [5, 7]},
            {"id_comms": [6, 5]},
        ],
    )
    def test_changes_with_each_committed_field(self, overrides):
        assert compute_input_hash(_params(**overrides)) != compute_input_hash(_params())

    def test_fits_in_256_bits(self):
        assert 0 <= compute_input_hash(_params()) < 2**256


class TestWithInputHash:
    """Tests for with_input_hash()."""

    def test_sets_hash_without_mutating(self):
        params = _params()
        hashed = with_input_hash(params)

        assert params.input_hash is None
        assert hashed.input_hash == compute_input_hash(params)
        assert hashed.id_comms == params.id_comms
