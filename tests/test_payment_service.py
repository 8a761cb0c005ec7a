import os
import sys
import webbrowser

import pytest

from schemas import Order, PaymentMethod
from services.checkout_errors import PaymentRedirectError
from services.payment_service import (
    PaymentRedirector,
    build_payment_methods,
    payment_method_caps,
    serialize_payment_methods,
)


def _methods(price):
    return serialize_payment_methods(build_payment_methods(price))


@pytest.mark.parametrize(
    "price, expected",
    [
        (100, "credit,paypay,aupay"),
        (0, "credit,paypay,aupay"),
        (250.75, "credit,paypay,aupay"),
        (-100, "credit,paypay,aupay"),
        (300000, "credit,paypay,aupay"),
        (300001, "credit,paypay"),
        (500000, "credit,paypay"),
        (500001, "credit"),
        (sys.maxsize, "credit"),
        (float("inf"), "credit"),
    ],
)
def test_build_payment_methods_by_price(price, expected):
    assert _methods(price) == expected


def test_credit_is_always_first():
    for price in (-1e12, 0, 1, 300000.5, 1e18):
        methods = build_payment_methods(price)
        assert methods[0] is PaymentMethod.CREDIT


def test_build_payment_methods_is_repeatable():
    assert build_payment_methods(123456) == build_payment_methods(123456)


def test_serialize_drops_duplicates_and_keeps_order():
    methods = [PaymentMethod.PAYPAY, PaymentMethod.CREDIT, PaymentMethod.PAYPAY]
    assert serialize_payment_methods(methods) == "paypay,credit"


def test_payment_method_caps():
    assert payment_method_caps() == {
        PaymentMethod.CREDIT: None,
        PaymentMethod.PAYPAY: 500000,
        PaymentMethod.AUPAY: 300000,
    }


class FakeBrowser:
    def __init__(self, result=True, error=None):
        self.result = result
        self.error = error
        self.opened = []

    def open(self, url, new=0, autoraise=True):
        if self.error:
            raise self.error
        self.opened.append((url, new))
        return self.result


@pytest.fixture
def order():
    return Order(id="order-123", totalPrice=250, paymentMethod="credit")


def _use_browser(monkeypatch, browser):
    monkeypatch.setenv("DISPLAY", ":0")
    monkeypatch.setattr(webbrowser, "get", lambda *args, **kwargs: browser)


def test_build_payment_url_does_not_escape_id():
    redirector = PaymentRedirector("https://payment.example.com/pay")
    assert (
        redirector.build_payment_url("order 123&special")
        == "https://payment.example.com/pay?orderId=order 123&special"
    )
    assert (
        redirector.build_payment_url('<script>alert("XSS")</script>')
        == 'https://payment.example.com/pay?orderId=<script>alert("XSS")</script>'
    )


async def test_initiate_opens_payment_link(monkeypatch, order):
    browser = FakeBrowser()
    _use_browser(monkeypatch, browser)
    redirector = PaymentRedirector("https://payment.example.com/pay", enabled=True)

    await redirector.initiate(order)

    assert browser.opened == [("https://payment.example.com/pay?orderId=order-123", 2)]


async def test_initiate_without_browser_is_noop(monkeypatch, order):
    def no_browser(*args, **kwargs):
        raise webbrowser.Error("could not locate runnable browser")

    monkeypatch.setenv("DISPLAY", ":0")
    monkeypatch.setattr(webbrowser, "get", no_browser)
    redirector = PaymentRedirector("https://payment.example.com/pay", enabled=True)

    assert await redirector.initiate(order) is None


async def test_initiate_disabled_skips_browser(monkeypatch, order):
    browser = FakeBrowser()
    _use_browser(monkeypatch, browser)
    redirector = PaymentRedirector("https://payment.example.com/pay", enabled=False)

    await redirector.initiate(order)

    assert browser.opened == []


async def test_initiate_raises_when_browser_refuses(monkeypatch, order):
    _use_browser(monkeypatch, FakeBrowser(result=False))
    redirector = PaymentRedirector("https://payment.example.com/pay", enabled=True)

    with pytest.raises(PaymentRedirectError) as exc_info:
        await redirector.initiate(order)

    assert exc_info.value.reason == "payment redirect failed"
    assert exc_info.value.order is order


async def test_initiate_raises_when_browser_errors(monkeypatch, order):
    _use_browser(monkeypatch, FakeBrowser(error=webbrowser.Error("boom")))
    redirector = PaymentRedirector("https://payment.example.com/pay", enabled=True)

    with pytest.raises(PaymentRedirectError):
        await redirector.initiate(order)


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="display detection is X11/Wayland specific")
async def test_initiate_on_headless_host_does_not_run_console_browser(monkeypatch, tmp_path, order):
    marker = tmp_path / "launched"
    script = tmp_path / "www-browser"
    script.write_text(f"#!/bin/sh\ntouch {marker}\n")
    script.chmod(0o755)
    monkeypatch.setenv("PATH", str(tmp_path), prepend=os.pathsep)
    monkeypatch.delenv("DISPLAY", raising=False)
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    redirector = PaymentRedirector("https://payment.example.com/pay", enabled=True)

    await redirector.initiate(order)

    assert not marker.exists()


async def test_initiate_skips_console_browser_even_with_display(monkeypatch, order):
    class ConsoleBrowser(webbrowser.GenericBrowser):
        def __init__(self):
            super().__init__("www-browser")
            self.opened = []

        def open(self, url, new=0, autoraise=True):
            self.opened.append(url)
            return True

    browser = ConsoleBrowser()
    _use_browser(monkeypatch, browser)
    redirector = PaymentRedirector("https://payment.example.com/pay", enabled=True)

    await redirector.initiate(order)

    assert browser.opened == []
