from catalog import extractor
from catalog.extractor import extract_products, load_document, product_id_from_href

SAMPLE_HTML = """
<div id="storeGrid">
  <div class="flip-card" data-type="code">
    <h3 class="product-title"> Node API Starter </h3>
    <p class="product-description">Express server boilerplate</p>
    <a class="explore-btn" href="product7.html">Explore</a>
  </div>
  <div class="flip-card">
    <h3 class="product-title">Orphan Card</h3>
  </div>
</div>
"""


def test_product_id_from_href():
    assert product_id_from_href("product7.html") == "7"
    assert product_id_from_href("product12.html") == "12"


def test_extract_products_reads_card_fields():
    products = extract_products(SAMPLE_HTML)

    assert len(products) == 2
    first = products[0]
    assert first.id == "7"
    assert first.title == "Node API Starter"
    assert first.description == "Express server boilerplate"
    assert first.category == "code"
    assert "developer" in first.tags
    assert first.element is not None
    assert first.element["data-type"] == "code"


def test_extract_products_degrades_missing_fields_to_empty(caplog):
    caplog.set_level("WARNING")

    orphan = extract_products(SAMPLE_HTML)[1]

    assert orphan.id == ""
    assert orphan.description == ""
    assert orphan.category == ""
    assert any("no explore link" in message for message in caplog.messages)


def test_extract_products_keeps_document_order(storefront_document):
    products = extract_products(storefront_document)

    assert [product.id for product in products] == [str(n) for n in range(1, 9)]
    assert products[0].title == "JavaScript Beginner Guide"


def test_load_document_reads_files(tmp_path):
    page = tmp_path / "store.html"
    page.write_text(SAMPLE_HTML, encoding="utf-8")

    document = load_document(str(page))

    assert len(document.select(".flip-card")) == 2


def test_load_document_accepts_raw_html():
    assert len(load_document(SAMPLE_HTML).select(".flip-card")) == 2


def test_load_document_renders_urls(monkeypatch):
    calls = []

    def fake_render_page(url, wait_selector=None):
        calls.append((url, wait_selector))
        return SAMPLE_HTML

    monkeypatch.setattr(extractor, "render_page", fake_render_page)

    document = load_document("https://store.test/")

    assert calls == [("https://store.test/", ".flip-card")]
    assert len(extract_products(document)) == 2


def test_load_document_missing_file_is_empty(tmp_path, caplog):
    caplog.set_level("WARNING")

    document = load_document(str(tmp_path / "missing.html"))

    assert extract_products(document) == []
    assert any("could not be read" in message for message in caplog.messages)
