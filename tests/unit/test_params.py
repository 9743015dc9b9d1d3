"""
Parameter Model Unit Tests
Tests for core/schemas/params.py (wire decoding)
"""
import json

import pytest
from pydantic import ValidationError

from core.schemas.params import ProofParameters, ProvingConfiguration, parse_big_int


WIRE = {
    "startIndex": 3,
    "preRoot": "12345",
    "postRoot": "0x0abc",
    "idComms": [1, "2", "0x03"],
    "merkleProofs": [["0x1", 2], [3, "4"], [5, 6]],
}


class TestParseBigInt:

    @pytest.mark.parametrize(
        "value,expected",
        [(0, 0), (42, 42), ("42", 42), ("0x2a", 42), ("0x2A", 42), ("007", 7), (2**300, 2**300)],
    )
    def test_accepted_forms(self, value, expected):
        assert parse_big_int(value) == expected

    @pytest.mark.parametrize(
        "value",
        [-1, "-1", "", "0x", "abc", 1.5, None, True, [1], "+0", " 0 ", "0_0", "0X0", "\u0661"],
    )
    def test_rejected_forms(self, value):
        with pytest.raises(ValueError):
            parse_big_int(value)


class TestProofParameters:

    def test_decodes_wire_names(self):
        params = ProofParameters.model_validate_json(json.dumps(WIRE))

        assert params.input_hash is None
        assert params.start_index == 3
        assert params.pre_root == 12345
        assert params.post_root == 0xABC
        assert params.id_comms == [1, 2, 3]
        assert params.merkle_proofs == [[1, 2], [3, 4], [5, 6]]

    def test_input_hash_optional_and_parsed(self):
        params = ProofParameters.model_validate({**WIRE, "inputHash": "0xff"})

        assert params.input_hash == 255

    def test_start_index_must_fit_uint32(self):
        with pytest.raises(ValidationError):
            ProofParameters.model_validate({**WIRE, "startIndex": 2**32})

    def test_missing_field_rejected(self):
        data = dict(WIRE)
        del data["postRoot"]

        with pytest.raises(ValidationError):
            ProofParameters.model_validate(data)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ProofParameters.model_validate({**WIRE, "extra": 1})

    def test_invalid_json_rejected(self):
        with pytest.raises(ValidationError):
            ProofParameters.model_validate_json(b"{not json")

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            ProofParameters.model_validate({**WIRE, "idComms": [1, -2, 3]})

    def test_to_wire_round_trip(self):
        params = ProofParameters.model_validate(WIRE)
        again = ProofParameters.model_validate(params.to_wire())

        assert again == params
        assert "inputHash" not in params.to_wire()


class TestProvingConfiguration:

    def test_valid(self):
        config = ProvingConfiguration(tree_depth=4, batch_size=2)
        assert (config.tree_depth, config.batch_size) == (4, 2)

    @pytest.mark.parametrize("depth,batch", [(0, 1), (4, 0), (-1, 1), (2, 5)])
    def test_invalid(self, depth, batch):
        with pytest.raises(ValueError):
            ProvingConfiguration(tree_depth=depth, batch_size=batch)

    def test_immutable(self):
        config = ProvingConfiguration(tree_depth=4, batch_size=2)
        with pytest.raises(AttributeError):
            config.tree_depth = 5
