"""
Property-Based Tests for request validation and identifiers
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from image_relay.domain.artifacts.value_objects import ArtifactId
from image_relay.domain.errors import ArtifactNotFoundError, InvalidRequestError
from image_relay.domain.processing.value_objects import TransformSpec
from tests.property.strategies import (
    malformed_identifiers,
    out_of_range_dimensions,
    valid_specs,
)


@given(valid_specs())
def test_valid_specs_parse_and_round_trip_format(specs):
    spec = TransformSpec.from_dict(specs)

    assert spec.output_format.value == specs["conversion"]["format"]
    assert TransformSpec.from_dict(spec.to_dict()) == spec


@given(out_of_range_dimensions)
def test_out_of_range_width_is_rejected(width):
    with pytest.raises(InvalidRequestError):
        TransformSpec.from_dict({"resize": {"width": width}, "conversion": {"format": "png"}})


@given(st.one_of(st.integers(max_value=0), st.integers(min_value=101)))
def test_out_of_range_quality_is_rejected(quality):
    with pytest.raises(InvalidRequestError):
        TransformSpec.from_dict({"compression": {"quality": quality}, "conversion": {"format": "jpeg"}})


@given(st.text().filter(lambda s: s.strip().lower() not in {"jpeg", "png", "webp", "avif", "tiff"}))
def test_unknown_formats_are_rejected(name):
    with pytest.raises(InvalidRequestError):
        TransformSpec.from_dict({"conversion": {"format": name}})


@given(malformed_identifiers)
def test_malformed_identifiers_read_as_not_found(value):
    with pytest.raises(ArtifactNotFoundError):
        ArtifactId(value)


@given(st.integers(min_value=0, max_value=50))
def test_generated_identifiers_validate(_):
    generated = ArtifactId.generate()
    assert ArtifactId(generated.value) == generated
