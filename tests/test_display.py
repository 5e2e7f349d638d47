import pytest

from calculator.display import Display


def test_render_shows_expression_or_zero(clock):
    d = Display(clock=clock)
    assert d.render("") == "0"
    assert d.render("1+2") == "1+2"


def test_flash_expires_after_delay(clock):
    d = Display(flash_ms=700, clock=clock)
    d.flash("Too long")
    assert d.render("12") == "Too long"
    assert d.remaining() == pytest.approx(0.7)
    clock.advance(0.7)
    assert d.render("12") == "12"
    assert d.remaining() == 0.0


def test_new_flash_replaces_pending_one(clock):
    d = Display(flash_ms=700, clock=clock)
    d.flash("Invalid")
    clock.advance(0.5)
    d.flash("No matching (")
    clock.advance(0.5)
    assert d.render("") == "No matching ("


def test_cancel_flash(clock):
    d = Display(clock=clock)
    d.flash("Invalid", ms=5000)
    d.cancel_flash()
    assert not d.flashing
    assert d.render("7") == "7"


def test_on_expire_fires_once(clock):
    fired = []
    d = Display(flash_ms=100, clock=clock, on_expire=lambda: fired.append(True))
    d.flash("Error")
    d.poll()
    clock.advance(0.2)
    d.poll()
    d.poll()
    assert fired == [True]
