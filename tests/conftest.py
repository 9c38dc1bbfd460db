from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from search import AdvancedSearch

STOREFRONT_PATH = Path(__file__).resolve().parent.parent / "templates" / "index.html"


@pytest.fixture
def storefront_html():
    return STOREFRONT_PATH.read_text(encoding="utf-8")


@pytest.fixture
def storefront_document(storefront_html):
    return BeautifulSoup(storefront_html, "html.parser")


@pytest.fixture
def storefront(storefront_document):
    return AdvancedSearch.from_document(storefront_document)
