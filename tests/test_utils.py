from sewn.constants import EXPERT_CATEGORIES, category_group
from sewn.utils.formatting import format_price, truncate
from sewn.utils.pagination import paginate
from sewn.utils.sanitization import sanitize_list, sanitize_string


def test_format_price():
    assert format_price(1500000) == "₩1,500,000"
    assert format_price(0) == "₩0"


def test_truncate():
    assert truncate("short", 10) == "short"
    assert truncate("abcdefghij", 5) == "abcde..."


def test_paginate_clamps_page_and_limit():
    items = list(range(120))

    page = paginate(items, 0, 500)

    assert page["page"] == 1
    assert page["limit"] == 50
    assert page["totalPages"] == 3
    assert page["data"] == list(range(50))


def test_paginate_past_the_end():
    page = paginate([1, 2, 3], 5, 12)
    assert page["data"] == []
    assert page["count"] == 3
    assert page["totalPages"] == 1


def test_paginate_empty():
    assert paginate([], 1, 12)["totalPages"] == 0


def test_sanitize_string():
    assert sanitize_string(None) is None
    assert sanitize_string(' <script>"x"</script> ') == "&lt;script&gt;&quot;x&quot;&lt;/script&gt;"


def test_sanitize_list():
    assert sanitize_list(["a", " a", "", "<b>", None]) == ["a", "&lt;b&gt;"]


def test_every_category_has_a_group():
    assert len(EXPERT_CATEGORIES) == 16
    assert all(category_group(c) for c in EXPERT_CATEGORIES)
    assert category_group("pattern_maker") == "TECHNICAL"
    assert category_group("unknown") is None
