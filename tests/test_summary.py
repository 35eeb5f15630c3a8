from types import SimpleNamespace

from summary import WalletSummary


def wallet(address, native, token, primary=False):
    return SimpleNamespace(address=address, native_balance=native, token_balance=token, is_primary=primary)


def test_totals():
    summary = WalletSummary([wallet("A", 1.5, 100), wallet("B", 2.5, 0)])
    assert summary.total_native == 4.0
    assert summary.total_token == 100


def test_empty():
    summary = WalletSummary([])
    assert summary.total_native == 0
    assert summary.total_token == 0
    assert summary.rows() == []


def test_rows_keep_input_order():
    rows = WalletSummary([wallet("P", 1, 2, primary=True), wallet("S", 3, 4)]).rows()
    assert [(r["address"], r["token"], r["native"], r["primary"]) for r in rows] == [
        ("P", 2, 1, True),
        ("S", 4, 3, False),
    ]
