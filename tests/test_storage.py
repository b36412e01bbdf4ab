import json

import pytest

from reqtui.models import Request
from reqtui.storage import StorageError, load_requests, save_request


@pytest.fixture
def requests_dir(tmp_path):
    return tmp_path / "requests"


def test_load_missing_directory_is_empty(requests_dir):
    assert load_requests(requests_dir) == []


def test_save_and_reload_round_trip(requests_dir):
    request = Request(
        name="X",
        method="PUT",
        url="https://a/b",
        headers={"H": "V"},
        body="{}",
    )
    saved = save_request(request, requests_dir)
    assert saved == [request]
    assert load_requests(requests_dir) == [request]


def test_saved_file_layout(requests_dir):
    save_request(Request(name="ping", url="http://x"), requests_dir)
    path = requests_dir / "ping.json"
    text = path.read_text(encoding="utf-8")
    assert text == (
        "{\n"
        '  "name": "ping",\n'
        '  "method": "GET",\n'
        '  "url": "http://x",\n'
        '  "headers": {},\n'
        '  "body": ""\n'
        "}\n"
    )


def test_save_overwrites_same_name(requests_dir):
    save_request(Request(name="a", url="http://old"), requests_dir)
    saved = save_request(Request(name="a", url="http://new"), requests_dir)
    assert [request.url for request in saved] == ["http://new"]


def test_load_is_sorted_by_file_name(requests_dir):
    for name in ("b", "a", "c"):
        save_request(Request(name=name, url=f"http://{name}"), requests_dir)
    assert [request.name for request in load_requests(requests_dir)] == ["a", "b", "c"]


def test_corrupt_file_is_skipped(requests_dir):
    save_request(Request(name="good", url="http://good"), requests_dir)
    (requests_dir / "broken.json").write_text("{not json", encoding="utf-8")
    (requests_dir / "list.json").write_text("[]", encoding="utf-8")
    (requests_dir / "method.json").write_text(
        json.dumps({"name": "method", "method": "BREW", "url": "http://x"}),
        encoding="utf-8",
    )
    (requests_dir / "notes.txt").write_text("ignored", encoding="utf-8")
    assert [request.name for request in load_requests(requests_dir)] == ["good"]


def test_missing_name_falls_back_to_file_stem(requests_dir):
    requests_dir.mkdir()
    (requests_dir / "stem.json").write_text(
        json.dumps({"method": "post", "url": "http://x"}), encoding="utf-8"
    )
    (request,) = load_requests(requests_dir)
    assert request.name == "stem"
    assert request.method == "POST"
    assert request.headers == {}
    assert request.body == ""


@pytest.mark.parametrize("name", ["", "..", "a/b", "a\\b"])
def test_invalid_names_are_rejected(requests_dir, name):
    with pytest.raises(StorageError):
        save_request(Request(name=name, url="http://x"), requests_dir)


def test_unwritable_directory_raises_storage_error(tmp_path):
    blocker = tmp_path / "requests"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(StorageError):
        save_request(Request(name="a"), blocker)


def test_deeply_nested_file_is_skipped(requests_dir):
    save_request(Request(name="good", url="http://good"), requests_dir)
    (requests_dir / "deep.json").write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
    assert [request.name for request in load_requests(requests_dir)] == ["good"]
