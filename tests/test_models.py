from datetime import datetime, timezone

import pytest

from putio_sdk.models import (
    MP4,
    ApiStatus,
    Disk,
    File,
    FileList,
    Friend,
    FriendList,
    SearchResult,
    Settings,
    Transfer,
    TransferList,
    UserInfo,
)

from conftest import FILE_PAYLOAD, FOLDER_PAYLOAD, INFO_PAYLOAD, MP4_PAYLOAD, SETTINGS_PAYLOAD, TRANSFER_PAYLOAD


@pytest.mark.parametrize("model, payload", [
    (File, FILE_PAYLOAD),
    (Transfer, TRANSFER_PAYLOAD),
    (UserInfo, INFO_PAYLOAD),
    (Settings, SETTINGS_PAYLOAD),
    (MP4, MP4_PAYLOAD),
    (Friend, {"name": "bob"}),
])
def test_decoding_keeps_every_declared_field(model, payload):
    record = model.from_dict(payload)

    assert record.to_dict() == payload
    assert record.raw is payload


def test_file_parses_timestamps():
    file = File.from_dict(FILE_PAYLOAD)

    assert file.created_at == datetime(2013, 9, 7, 21, 32, 3)
    assert file.first_accessed_at is None


def test_trailing_z_timestamp_is_utc():
    file = File.from_dict(dict(FILE_PAYLOAD, created_at="2013-09-07T21:32:03Z"))

    assert file.created_at == datetime(2013, 9, 7, 21, 32, 3, tzinfo=timezone.utc)


def test_unmapped_fields_stay_on_raw():
    file = File.from_dict(dict(FILE_PAYLOAD, extension="iso"))

    assert file.raw["extension"] == "iso"
    assert "extension" not in file.to_dict()


def test_records_are_immutable():
    file = File.from_dict(FILE_PAYLOAD)

    with pytest.raises(AttributeError):
        file.name = "other"


def test_folder_detection():
    assert File.from_dict(FOLDER_PAYLOAD).is_folder
    assert not File.from_dict(FILE_PAYLOAD).is_folder


def test_missing_required_key_raises_key_error():
    with pytest.raises(KeyError):
        File.from_dict({"name": "no id"})


def test_file_list_without_parent():
    listing = FileList.from_dict({"files": [FILE_PAYLOAD, FOLDER_PAYLOAD], "status": "OK"})

    assert listing.parent is None
    assert listing.status == "OK"
    assert len(listing) == 2
    assert [f.name for f in listing] == ["ubuntu.iso", "Your Files"]


def test_search_result_next_page():
    result = SearchResult.from_dict({
        "files": [FILE_PAYLOAD],
        "next": "https://api.put.io/v2/files/search/ubuntu/page/2",
    })

    assert result.next.endswith("/page/2")
    assert list(result)[0].id == 42


def test_transfer_list_and_finished_flag():
    seeding = dict(TRANSFER_PAYLOAD, id=8, status="SEEDING", percent_done=100)
    transfers = TransferList.from_dict({"transfers": [TRANSFER_PAYLOAD, seeding]})

    assert [t.is_finished for t in transfers] == [False, True]


def test_transfer_null_counters_default_to_zero():
    transfer = Transfer.from_dict({"id": 9, "down_speed": None, "percent_done": None})

    assert transfer.down_speed == 0
    assert transfer.percent_done == 0


def test_user_info_disk():
    info = UserInfo.from_dict(INFO_PAYLOAD)

    assert info.disk == Disk(avail=750, used=250, size=1000)
    assert info.subtitle_languages == ["eng", "tur"]


def test_disk_usage_with_zero_size():
    assert Disk(avail=0, used=0, size=0).usage_percentage == 0.0


def test_friend_list():
    friends = FriendList.from_dict({"friends": [{"name": "bob"}]})

    assert friends.friends == [Friend(name="bob")]


def test_api_status_passthrough():
    status = ApiStatus.from_dict({"status": "ERROR", "error_message": "nope"})

    assert status.status == "ERROR"
    assert not status.ok
    assert status.raw["error_message"] == "nope"


@pytest.mark.parametrize("model, payload", [
    (File, dict(FILE_PAYLOAD, id="not-an-int")),
    (File, dict(FILE_PAYLOAD, size="huge")),
    (File, dict(FILE_PAYLOAD, is_shared="maybe")),
    (File, dict(FILE_PAYLOAD, name=42)),
    (File, dict(FILE_PAYLOAD, parent_id=True)),
    (File, dict(FILE_PAYLOAD, created_at=1378589523)),
    (Transfer, dict(TRANSFER_PAYLOAD, percent_done="45%")),
    (Transfer, dict(TRANSFER_PAYLOAD, extract="yes")),
    (Transfer, dict(TRANSFER_PAYLOAD, status=["DOWNLOADING"])),
    (UserInfo, dict(INFO_PAYLOAD, username=None)),
    (UserInfo, dict(INFO_PAYLOAD, disk="x")),
    (UserInfo, dict(INFO_PAYLOAD, disk={"avail": "750", "used": 250, "size": 1000})),
    (UserInfo, dict(INFO_PAYLOAD, subtitle_languages="eng")),
    (UserInfo, dict(INFO_PAYLOAD, subtitle_languages=["eng", 3])),
    (Settings, dict(SETTINGS_PAYLOAD, is_invisible="no")),
    (Settings, dict(SETTINGS_PAYLOAD, default_download_folder="0")),
    (MP4, dict(MP4_PAYLOAD, percent_done="100")),
    (MP4, dict(MP4_PAYLOAD, status=1)),
    (Friend, {"name": ["bob"]}),
    (ApiStatus, {"status": True}),
])
def test_wrongly_typed_field_is_rejected(model, payload):
    with pytest.raises(TypeError):
        model.from_dict(payload)


@pytest.mark.parametrize("model, payload", [
    (FileList, {"files": [1], "status": "OK"}),
    (FileList, {"files": "ubuntu.iso"}),
    (FileList, {"files": [FILE_PAYLOAD], "parent": "root"}),
    (SearchResult, {"files": [FILE_PAYLOAD], "next": 2}),
    (TransferList, {"transfers": {"id": 7}}),
    (FriendList, {"friends": ["bob"]}),
])
def test_wrongly_typed_nested_object_is_rejected(model, payload):
    with pytest.raises(TypeError):
        model.from_dict(payload)


@pytest.mark.parametrize("model", [File, FileList, Transfer, UserInfo, Disk, Friend, ApiStatus])
def test_non_object_payload_is_rejected(model):
    with pytest.raises(TypeError):
        model.from_dict(["not", "an", "object"])
