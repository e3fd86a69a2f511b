import json

import pytest
from pydantic import ValidationError

from moviemax.services.decoders import decode_detail, decode_list
from moviemax.services.errors import DecodeError, InvalidStructureError

from payloads import detail_body, movie, page_body


def test_decode_list_drops_malformed_entries_and_keeps_order():
    missing_id = movie(None, "No Id")
    del missing_id["id"]
    missing_title = movie(11, "No Title")
    del missing_title["title"]
    missing_date = movie(12, "No Date")
    del missing_date["release_date"]
    missing_poster = movie(13, "No Poster Key")
    del missing_poster["poster_path"]

    body = page_body(
        movie(3, "Gamma"),
        missing_id,
        movie(1, "Alpha"),
        missing_title,
        missing_date,
        movie(14, "Null Poster", poster_path=None),
        movie(15, "Numeric Poster", poster_path=123),
        movie("16", "String Id"),
        "not-an-object",
        missing_poster,
        movie(2, "Beta", release_date="bad-date"),
    )

    entries = decode_list(body)

    assert [entry.id for entry in entries] == [3, 1, 2]
    assert [entry.title for entry in entries] == ["Gamma", "Alpha", "Beta"]
    assert entries[2].year is None


def test_decode_list_empty_results():
    assert decode_list(page_body()) == []


@pytest.mark.parametrize(
    "payload",
    [
        {"page": 1},
        {"results": None},
        {"results": {"id": 1}},
        [movie(1, "Alpha")],
        "results",
    ],
)
def test_decode_list_requires_results_array(payload):
    with pytest.raises(InvalidStructureError) as exc_info:
        decode_list(json.dumps(payload).encode())
    assert str(exc_info.value) == "Invalid JSON structure"


def test_decode_list_invalid_json():
    with pytest.raises(DecodeError) as exc_info:
        decode_list(b"<html>502 Bad Gateway</html>")
    assert not isinstance(exc_info.value, InvalidStructureError)


def test_decode_detail_full_payload():
    detail = decode_detail(detail_body())

    assert detail.title == "Dune: Part Two"
    assert detail.backdrop_path == "/backdrop.jpg"
    assert detail.vote_count == 5120
    assert detail.vote_average == pytest.approx(8.2)
    assert detail.revenue == 711_844_358
    assert detail.runtime_minutes == 167
    assert detail.formatted_duration == "2H 47M"
    assert detail.formatted_revenue == "$711.8M"


def test_decode_detail_null_runtime_and_backdrop():
    detail = decode_detail(detail_body(runtime=None, backdrop_path=None))
    assert detail.formatted_duration == "N/A"
    assert detail.backdrop_url is None


def test_decode_detail_accepts_integer_vote_average():
    detail = decode_detail(detail_body(vote_average=8))
    assert detail.vote_average == 8.0


@pytest.mark.parametrize(
    "field", ["original_title", "vote_count", "vote_average", "overview", "revenue"]
)
def test_decode_detail_missing_required_field(field):
    payload = json.loads(detail_body())
    del payload[field]
    with pytest.raises(DecodeError) as exc_info:
        decode_detail(json.dumps(payload).encode())
    assert isinstance(exc_info.value.__cause__, ValidationError)


@pytest.mark.parametrize(
    "overrides",
    [
        {"vote_count": "5120"},
        {"revenue": 12.5},
        {"original_title": None},
        {"runtime": "2h"},
        {"vote_count": True},
    ],
)
def test_decode_detail_rejects_mistyped_fields(overrides):
    with pytest.raises(DecodeError):
        decode_detail(detail_body(**overrides))


@pytest.mark.parametrize("body", [b"", b"not json", b"[]", b"null"])
def test_decode_detail_rejects_non_objects(body):
    with pytest.raises(DecodeError):
        decode_detail(body)


def test_decode_list_deeply_nested_body_is_a_decode_error():
    body = b'{"results": [' + b"[" * 100_000 + b"]" * 100_000 + b"]}"
    with pytest.raises(DecodeError) as exc_info:
        decode_list(body)
    assert isinstance(exc_info.value.__cause__, RecursionError)
