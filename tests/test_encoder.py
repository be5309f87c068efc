import pytest

from stock_digest.encoder import build_compact_block

from conftest import make_item


def test_block_layout():
    digest = {
        "AMZN": [make_item("Amazon wins contract", 1)],
        "NVDA": [make_item("NVIDIA | record quarter", 2), make_item("NVIDIA shares dip", 3)],
    }
    block = build_compact_block(digest, 4)
    assert block.splitlines() == [
        "AMZN",
        "- Mon, 14 Oct 2024 | Amazon wins contract | https://news.example.com/1",
        "NVDA",
        "- Mon, 14 Oct 2024 | NVIDIA | record quarter | https://news.example.com/2",
        "- Mon, 14 Oct 2024 | NVIDIA shares dip | https://news.example.com/3",
    ]
    assert "\n\n" not in block


def test_cap_limits_item_lines_in_order():
    items = [make_item(f"Headline {i}", i) for i in range(10)]
    lines = build_compact_block({"MSFT": items}, 4).splitlines()
    assert lines[0] == "MSFT"
    assert len(lines) == 5
    assert [line.split(" | ")[1] for line in lines[1:]] == [f"Headline {i}" for i in range(4)]


def test_deterministic_and_empty_subject():
    digest = {"INTC": [], "AMD": [make_item("AMD update", 1)]}
    assert build_compact_block(digest, 4) == build_compact_block(digest, 4)
    assert build_compact_block(digest, 4).startswith("INTC\nAMD\n")
    assert build_compact_block({}, 4) == ""


def test_negative_cap_rejected():
    with pytest.raises(ValueError):
        build_compact_block({"A": []}, -1)
