"""Unit tests for column name normalization."""

import pytest

from table_uploader.utils.column_normalizer import (
    camel_case_to_snake_case,
    normalize_column_names,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, expected",
    [
        ("personId", "person_id"),
        ("yearOfBirth", "year_of_birth"),
        ("conceptId2", "concept_id_2"),
        ("HTTPStatus", "http_status"),
        ("already_snake", "already_snake"),
        ("x", "x"),
    ],
)
def test_camel_case_to_snake_case(name, expected):
    assert camel_case_to_snake_case(name) == expected


@pytest.mark.unit
def test_normalize_column_names_keeps_order():
    assert normalize_column_names(["personId", "genderConceptId"]) == [
        "person_id",
        "gender_concept_id",
    ]
