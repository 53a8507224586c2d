import pytest
from pydantic import ValidationError

from jsonapi_provider.pagination import (
    CursorPage,
    CursorPageComposer,
    OffsetPage,
    OffsetPageComposer,
    PageNumberComposer,
    PageNumberPage,
)


def test_page_number_composer():
    page = PageNumberPage(number=0, size=25, relationships={"tags": {"size": 5}})

    assert PageNumberComposer().compose_page(page) == [
        ("number", "0"),
        ("size", "25"),
        ("relationships][tags][size", "5"),
    ]


def test_page_number_composer_skips_unset_fields():
    assert PageNumberComposer().compose_page({"number": 1}) == [("number", "1")]
    assert PageNumberComposer().compose_page({}) == []


def test_page_number_page_rejects_zero_size():
    with pytest.raises(ValidationError):
        PageNumberComposer().compose_page({"number": 1, "size": 0})


def test_offset_composer_accepts_mappings():
    assert OffsetPageComposer().compose_page({"offset": 0, "limit": 10}) == [
        ("offset", "0"),
        ("limit", "10"),
    ]
    assert OffsetPageComposer().compose_page(OffsetPage(limit=3)) == [("limit", "3")]


def test_offset_page_rejects_negative_offset():
    with pytest.raises(ValidationError):
        OffsetPage(offset=-1)


def test_cursor_composer():
    assert CursorPageComposer().compose_page(CursorPage(cursor="abc", size=2)) == [
        ("cursor", "abc"),
        ("size", "2"),
    ]
