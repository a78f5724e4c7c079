import pytest
from pydantic import ValidationError

from floortrack.core.errors import InvalidArgumentError
from floortrack.core.identifiers import MAX_ID, normalize_mac, parse_id
from floortrack.schemas.access import AssignPendingUserRequest
from floortrack.schemas.location import BuildingResponse


@pytest.mark.parametrize("value, expected", [("42", 42), (" 7 ", 7), (9, 9), (str(MAX_ID), MAX_ID)])
def test_parse_id_accepts_positive_integers(value, expected):
    assert parse_id(value) == expected


@pytest.mark.parametrize("value", ["abc", "4.2", 4.2, "-1", "0", 0, True, None, "", str(MAX_ID + 1)])
def test_parse_id_rejects_everything_else(value):
    with pytest.raises(InvalidArgumentError):
        parse_id(value, "floorId")


def test_normalize_mac():
    assert normalize_mac("  AA:BB:CC:DD:EE:FF ") == "aa:bb:cc:dd:ee:ff"


def test_ids_serialize_as_strings():
    payload = BuildingResponse(id=2**62, name="HQ").model_dump(mode="json", by_alias=True)

    assert payload == {"id": str(2**62), "name": "HQ"}


def test_assign_request_collapses_repeated_groups():
    request = AssignPendingUserRequest.model_validate({"roleId": "3", "groupIds": ["2", 2, "5"]})

    assert request.role_id == 3
    assert request.group_ids == [2, 5]


def test_assign_request_requires_groups():
    with pytest.raises(ValidationError):
        AssignPendingUserRequest.model_validate({"roleId": "3", "groupIds": []})
