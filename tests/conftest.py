import pytest

from a11y_auditor.dom.builder import DOMBuilder
from a11y_auditor.dom.engine import AccessibilityEngine

# Een <head> die zelf geen enkele regel laat afgaan
CLEAN_HEAD = (
    '<title>Test page</title>\n'
    '<meta name="viewport" content="width=device-width, initial-scale=1">'
)


def page(body: str = "", head: str = CLEAN_HEAD, lang="en", body_attrs: str = "") -> str:
    """
    Bouwt een volledig document rond `body`. De body-inhoud begint altijd op regel 8,
    zodat tests voorspelbare regelnummers kunnen controleren.
    """
    lang_attr = f' lang="{lang}"' if lang is not None else ""
    return (
        "<!DOCTYPE html>\n"
        f"<html{lang_attr}>\n"
        "<head>\n"
        f"{head}\n"
        "</head>\n"
        f"<body{body_attrs}>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )


@pytest.fixture
def builder():
    return DOMBuilder()


@pytest.fixture
def engine():
    return AccessibilityEngine()


@pytest.fixture
def audit(engine):
    """Voert de volledige regelset uit op ruwe HTML en geeft de violations terug."""
    def _audit(html):
        return engine.run_audit(html)
    return _audit


@pytest.fixture
def find(audit):
    """Geeft alleen de violations met het gevraagde id terug."""
    def _find(html, rule_id):
        return [v for v in audit(html) if v.id == rule_id]
    return _find


@pytest.fixture
def html_page():
    return page
