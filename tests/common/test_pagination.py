from __future__ import annotations

from hrms_portal.common.pagination import Page, page_numbers


def test_page_from_keyed_payload():
    data = {"companies": [{"id": "c1"}, {"id": "c2"}], "total": 25, "page": 2, "limit": 10}
    page = Page.from_api(data, lambda d: d["id"], key="companies")
    assert page.items == ["c1", "c2"]
    assert page.total_pages == 3
    assert page.has_prev and page.has_next


def test_page_from_nested_pagination_block():
    data = {"data": [{"id": "e1"}], "pagination": {"totalCount": 1, "page": 1, "limit": 10}}
    page = Page.from_api(data, lambda d: d["id"])
    assert page.items == ["e1"]
    assert page.total == 1
    assert not page.has_next


def test_page_from_plain_list():
    page = Page.from_api([{"id": "a"}, "skip-me", {"id": "b"}], lambda d: d["id"], limit=5)
    assert page.items == ["a", "b"]
    assert page.total == 2
    assert page.limit == 5


def test_page_numbers_window():
    assert list(page_numbers(Page(total=100, page=5, limit=10))) == [3, 4, 5, 6, 7]
    assert list(page_numbers(Page(total=15, page=1, limit=10))) == [1, 2]
    assert list(page_numbers(Page())) == [1]
