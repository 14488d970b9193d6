import pytest

from peakpip.errors import DecodeError
from peakpip.models import PackageRecord


def test_nulls_become_empty_strings():
    record = PackageRecord.from_json({
        "info": {
            "name": "tiny",
            "version": "0.1",
            "summary": None,
            "author": None,
            "home_page": None,
            "license": None,
            "requires_dist": None,
            "classifiers": [],
        }
    })
    assert record.summary == ""
    assert record.license == ""
    assert record.dependencies == ()
    assert record.files == ()


def test_homepage_falls_back_to_project_urls():
    record = PackageRecord.from_json({
        "info": {"name": "tqdm", "version": "4.66.4", "home_page": "", "project_urls": {"Homepage": "https://tqdm.github.io"}},
    })
    assert record.homepage == "https://tqdm.github.io"


def test_keywords_split():
    comma = PackageRecord.from_json({"info": {"name": "a", "keywords": "http, client,requests"}})
    space = PackageRecord.from_json({"info": {"name": "b", "keywords": "progressbar progressmeter"}})
    assert comma.keywords == ("http", "client", "requests")
    assert space.keywords == ("progressbar", "progressmeter")


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"releases": {}},
        {"info": {"name": ""}},
        {"info": {"name": "x", "requires_dist": "not-a-list"}},
        {"info": {"name": "x"}, "urls": {"bad": "shape"}},
    ],
)
def test_malformed_payloads(payload):
    with pytest.raises(DecodeError):
        PackageRecord.from_json(payload)


def test_record_is_immutable():
    record = PackageRecord.from_json({"info": {"name": "x", "project_urls": {"Source": "s"}}})
    with pytest.raises(AttributeError):
        record.name = "y"
    with pytest.raises(TypeError):
        record.project_urls["Source"] = "other"
