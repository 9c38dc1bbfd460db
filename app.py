import logging
import os
from pathlib import Path

from bs4 import BeautifulSoup
from flask import Flask, jsonify, request
from flask_cors import CORS

from catalog.extractor import load_document
from popularity import ALL_CATEGORIES, PopularityStore, browse, popular_badges
from render import apply_badges, apply_instruction
from search import AdvancedSearch, RenderInstruction, SuggestionPanel

CATALOG_SOURCE = os.environ.get(
    "STOREFRONT_CATALOG", str(Path(__file__).resolve().parent / "templates" / "index.html")
)
POPULARITY_STORE_PATH = os.environ.get("POPULARITY_STORE_PATH", "popularity.json")

app = Flask(__name__)
app.logger.setLevel(logging.INFO)
CORS(app)

# Parsed once; each request works on its own copy of the page.
CATALOG_DOCUMENT = load_document(CATALOG_SOURCE)
CATALOG_HTML = str(CATALOG_DOCUMENT)
CATALOG = AdvancedSearch.from_document(CATALOG_DOCUMENT).products
POPULARITY = PopularityStore(POPULARITY_STORE_PATH)


def _session():
    return AdvancedSearch(CATALOG)


@app.route('/')
def home():
    query = request.args.get("q", "")
    category = request.args.get("filter", ALL_CATEGORIES)

    if query.strip():
        instruction = _session().on_submit(query)
        instruction.input_value = query
    else:
        instruction = RenderInstruction(
            suggestions=SuggestionPanel(), products=browse(CATALOG, POPULARITY, category)
        )

    document = BeautifulSoup(CATALOG_HTML, "html.parser")
    apply_instruction(document, instruction)
    apply_badges(document, popular_badges(CATALOG, POPULARITY))
    return str(document)


@app.route('/api/search')
def search():
    query = request.args.get("q")
    if query is None:
        return jsonify({"error": "Missing query parameter 'q'"}), 400

    try:
        display = _session().perform_search(query)
    except Exception:
        app.logger.exception("Error searching catalog for %r", query)
        return jsonify({"error": "Search failed"}), 500

    app.logger.info("Search for %r returned %d items", query, len(display.visible))
    payload = display.to_dict()
    payload.update({"query": query, "count": len(display.visible)})
    return jsonify(payload)


@app.route('/api/suggestions')
def suggestions():
    query = request.args.get("q", "")
    return jsonify(_session().on_query_changed(query).suggestions.to_dict())


@app.route('/api/products')
def products():
    category = request.args.get("filter", ALL_CATEGORIES)
    display = browse(CATALOG, POPULARITY, category)
    badges = set(popular_badges(CATALOG, POPULARITY))
    by_id = {product.id: product for product in CATALOG}

    return jsonify(
        [
            dict(
                by_id[product_id].to_dict(),
                popularity=POPULARITY.get(product_id),
                popular=product_id in badges,
            )
            for product_id in display.visible
        ]
    )


@app.route('/api/products/<product_id>/explore', methods=["POST"])
def explore(product_id):
    if _session().find_product(product_id) is None:
        return jsonify({"error": f"Unknown product '{product_id}'"}), 404

    count = POPULARITY.record_explore(product_id)
    return jsonify({"id": product_id, "popularity": count})


if __name__ == '__main__':
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port)
