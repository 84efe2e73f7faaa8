import pytest
from hypothesis import given
from hypothesis import strategies as st

from csv_nest.key_mapping.convention import KeyConvention, parse_index
from csv_nest.key_mapping.nested import assemble_all, assemble_record, strip_quotes
from csv_nest.key_mapping.structure import infer_structure


def test_key_convention_split_and_composite_key() -> None:
    convention = KeyConvention(delimiter=".", index_pos=1)
    assert convention.split("company.0.name") == ("company", 0, "name")
    assert convention.split("company.1.address.city") == ("company", 1, "address.city")
    assert convention.composite_key("company", 2, "name") == "company.2.name"


def test_key_convention_split_returns_none_for_scalar_keys() -> None:
    convention = KeyConvention()
    assert convention.split("name") is None
    assert convention.split("a.b.c") is None
    assert convention.split("a.-1.c") is None


def test_key_convention_custom_delimiter_and_index_position() -> None:
    convention = KeyConvention(delimiter="-", index_pos=2)
    assert convention.split("org-staff-3-email") == ("org-staff", 3, "email")
    assert convention.split("org-3-email") is None
    assert convention.composite_key("org-staff", 0, "email") == "org-staff-0-email"


def test_key_convention_rejects_invalid_inputs() -> None:
    with pytest.raises(ValueError, match="delimiter must not be empty"):
        _ = KeyConvention(delimiter="")
    with pytest.raises(ValueError, match="index_pos must be at least 1"):
        _ = KeyConvention(index_pos=0)


def test_key_convention_equality() -> None:
    assert KeyConvention() == KeyConvention(".", 1)
    assert KeyConvention() != KeyConvention("-", 1)
    assert hash(KeyConvention()) == hash(KeyConvention(".", 1))


def test_parse_index_accepts_leading_zeros_and_rejects_negatives() -> None:
    assert parse_index("0") == 0
    assert parse_index("00") == 0
    assert parse_index("007") == 7
    assert parse_index("-1") is None
    assert parse_index("x") is None
    assert parse_index("") is None


@pytest.mark.parametrize("segment", ["+1", "1_0", " 1", "1 ", "٣", "1.5"])
def test_parse_index_rejects_non_ascii_digit_forms(segment: str) -> None:
    assert parse_index(segment) is None


def test_infer_structure_keeps_unusual_index_segments_as_scalars() -> None:
    convention = KeyConvention()
    record = {"a.1_0.x": "1", "a.+1.x": "2", "a.0.x": "3"}
    structure = infer_structure(record, convention)
    assert dict(structure) == {"a.1_0.x": (), "a.+1.x": (), "a": ("x",)}
    assert assemble_record(structure, record, convention) == {"a.1_0.x": "1", "a.+1.x": "2", "a": [{"x": "3"}]}


def test_infer_structure_groups_array_sub_fields_in_first_seen_order() -> None:
    example = {"id": "1", "a.0.y": "", "a.0.x": "", "a.1.y": "", "a.1.x": "", "b.0.z": ""}
    structure = infer_structure(example, KeyConvention())
    assert dict(structure) == {"id": (), "a": ("y", "x"), "b": ("z",)}
    assert list(structure) == ["id", "a", "b"]


@given(
    keys=st.lists(
        st.sampled_from(["id", "name", "a.0.x", "a.0.y", "a.1.x", "a.b.c", "b.2.z", "b.0.z.w"]),
        unique=True,
    ),
)
def test_infer_structure_is_deterministic_property(keys: list[str]) -> None:
    convention = KeyConvention()
    example = dict.fromkeys(keys, "")
    assert infer_structure(example, convention) == infer_structure(example, convention)
    assert list(infer_structure(example, convention)) == list(infer_structure(dict(example), convention))


def test_infer_structure_treats_non_numeric_segment_as_scalar() -> None:
    structure = infer_structure({"a.b.c": "1"}, KeyConvention())
    assert dict(structure) == {"a.b.c": ()}


def test_infer_structure_short_keys_are_scalar() -> None:
    structure = infer_structure({"a.0": "1", "b": "2"}, KeyConvention(index_pos=2))
    assert dict(structure) == {"a.0": (), "b": ()}


def test_infer_structure_plain_column_does_not_clear_array_group() -> None:
    convention = KeyConvention()
    assert dict(infer_structure({"a.0.x": "1", "a": "2"}, convention)) == {"a": ("x",)}
    assert dict(infer_structure({"a": "2", "a.0.x": "1"}, convention)) == {"a": ("x",)}


def test_infer_structure_empty_example_yields_empty_structure() -> None:
    structure = infer_structure({}, KeyConvention())
    assert dict(structure) == {}
    assert assemble_record(structure, {"a": "1"}, KeyConvention()) == {}


def test_infer_structure_is_read_only() -> None:
    structure = infer_structure({"a.0.x": "1"}, KeyConvention())
    with pytest.raises(TypeError):
        structure["b"] = ()  # type: ignore[index]


def test_assemble_record_groups_arrays() -> None:
    convention = KeyConvention()
    record = {"a.0.x": "1", "a.0.y": "2", "a.1.x": "3", "a.1.y": "4"}
    structure = infer_structure(record, convention)
    assert assemble_record(structure, record, convention) == {"a": [{"x": "1", "y": "2"}, {"x": "3", "y": "4"}]}


def test_assemble_record_missing_scalar_is_empty_string() -> None:
    convention = KeyConvention()
    structure = infer_structure({"name": "x", "age": "1"}, convention)
    assert assemble_record(structure, {"name": "y"}, convention) == {"name": "y", "age": ""}


def test_assemble_record_length_comes_from_first_sub_field() -> None:
    convention = KeyConvention()
    structure = infer_structure({"a.0.x": "", "a.0.y": ""}, convention)

    # Index 1 only has the second sub-field, so it is not detected.
    record = {"a.0.x": "1", "a.0.y": "2", "a.1.y": "4"}
    assert assemble_record(structure, record, convention) == {"a": [{"x": "1", "y": "2"}]}


def test_assemble_record_later_sub_field_stops_at_its_first_gap() -> None:
    convention = KeyConvention()
    structure = infer_structure({"a.0.x": "", "a.0.y": ""}, convention)

    record = {"a.0.x": "1", "a.1.x": "2", "a.2.x": "3", "a.0.y": "a", "a.2.y": "c"}
    assert assemble_record(structure, record, convention) == {"a": [{"x": "1", "y": "a"}, {"x": "2"}, {"x": "3"}]}


def test_assemble_record_array_absent_from_record_is_empty_list() -> None:
    convention = KeyConvention()
    structure = infer_structure({"id": "1", "a.0.x": ""}, convention)
    assert assemble_record(structure, {"id": "2"}, convention) == {"id": "2", "a": []}


def test_assemble_record_ignores_keys_missing_from_structure() -> None:
    convention = KeyConvention()
    structure = infer_structure({"id": "1"}, convention)
    assert assemble_record(structure, {"id": "2", "extra": "x", "b.0.z": "y"}, convention) == {"id": "2"}


def test_assemble_all_supports_ragged_arrays() -> None:
    convention = KeyConvention()
    records = [
        {"id": "1", "a.0.x": "1", "a.1.x": "2"},
        {"id": "2", "a.0.x": "3"},
    ]
    structure = infer_structure(records[0], convention)

    assert assemble_all(structure, records, convention) == [
        {"id": "1", "a": [{"x": "1"}, {"x": "2"}]},
        {"id": "2", "a": [{"x": "3"}]},
    ]


def test_strip_quotes_mutates_records_in_place() -> None:
    records = [{"a": '"5"', "b": 'say "hi"'}, {"a": "6", "b": '""'}]
    strip_quotes(records)
    assert records == [{"a": "5", "b": "say hi"}, {"a": "6", "b": ""}]
