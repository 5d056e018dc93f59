"""
test_demo.py - Smoke test for the interactive tutorial
"""

import demo


def test_tutorial_runs_in_quick_mode(monkeypatch, capsys):
    monkeypatch.setattr(demo, "QUICK_MODE", True)
    shop = demo.main()

    out = capsys.readouterr().out
    assert "TUTORIAL COMPLETE!" in out
    assert "InsufficientPayment" in out
    assert "PastMaxBuyDate" in out
    assert shop.ledger.verify_double_entry()['valid']
    assert not shop.is_paused()
