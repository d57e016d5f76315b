"""
Web application for collecting products and reviews.
"""

import logging
from typing import Any, Dict, Optional

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..analysis.ratings import ALL_PLATFORMS, FILTER_CHOICES
from ..database.manager import DatabaseManager, StoreError
from ..models.product import PLATFORMS
from ..services.catalog import CatalogService, ProductNotFoundError
from ..utils.helpers import format_rating, format_review_date, platform_label, star_states

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong"


class ReviewCollectorApp:
    """
    Flask application serving the catalog screens and JSON API.

    Screens:
    - Catalog entry form
    - Dashboard with platform filter and summary statistics
    - Product detail with rating histogram and review form
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        db_manager: Optional[DatabaseManager] = None,
    ):
        """
        Initialize the application.

        Args:
            config: Configuration dictionary
            db_manager: Store handle; one is created from ``database.path`` if omitted
        """
        self.config = self._get_default_config()
        for section, values in (config or {}).items():
            if isinstance(values, dict) and isinstance(self.config.get(section), dict):
                self.config[section] = {**self.config[section], **values}
            else:
                self.config[section] = values

        self.app = Flask(__name__)
        self.app.config.update(self.config["flask"])

        self.db_manager = db_manager or DatabaseManager(self.config["database"]["path"])
        self.catalog = CatalogService(self.db_manager, self.config)

        self._register_filters()
        self._register_routes()

        logger.info("Review collector app initialized")

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default application configuration."""
        return {
            "flask": {"SECRET_KEY": "dev-secret-key-change-in-production", "DEBUG": False},
            "database": {"path": "data/review_collector.db"},
            "catalog": {"recompute_on_write": False},
        }

    def _register_filters(self):
        """Register Jinja template filters and globals."""
        self.app.add_template_filter(format_rating, "rating")
        self.app.add_template_filter(star_states, "stars")
        self.app.add_template_filter(platform_label, "platform_label")
        self.app.add_template_filter(format_review_date, "review_date")
        self.app.jinja_env.globals.update(platforms=PLATFORMS, filter_choices=FILTER_CHOICES)

    def _platform_arg(self) -> str:
        """Platform filter from the query string, ``all`` when absent or unknown."""
        platform = request.args.get("platform", ALL_PLATFORMS).lower()
        if platform not in FILTER_CHOICES:
            logger.warning(f"Ignoring unknown platform filter {platform!r}")
            return ALL_PLATFORMS
        return platform

    def _json_body(self) -> Dict[str, Any]:
        """Request JSON object; a missing body is treated as empty."""
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")
        return data

    def _register_routes(self):
        """Register Flask routes."""

        @self.app.route("/", methods=["GET", "POST"])
        def home():
            """Catalog entry screen."""
            form = {"platform": PLATFORMS[0], "name": "", "url": "", "price": "", "image_url": ""}

            if request.method == "GET":
                return render_template("home.html", form=form, error=None)

            form.update({key: request.form.get(key, "") for key in form})
            try:
                product = self.catalog.create_product(
                    name=form["name"],
                    url=form["url"],
                    platform=form["platform"],
                    price=form["price"],
                    image_url=form["image_url"],
                )
            except ValueError as e:
                return render_template("home.html", form=form, error=str(e) or GENERIC_ERROR), 400
            except StoreError as e:
                logger.error(f"Error creating product: {e}")
                return render_template("home.html", form=form, error=str(e) or GENERIC_ERROR), 500

            return redirect(url_for("product_detail", product_id=product.id))

        @self.app.route("/dashboard")
        def dashboard():
            """Dashboard screen."""
            view = self.catalog.load_dashboard(self._platform_arg())
            return render_template("dashboard.html", view=view)

        @self.app.route("/products/<product_id>")
        def product_detail(product_id):
            """Product detail screen."""
            try:
                detail = self.catalog.load_product(product_id)
            except StoreError:
                return render_template("error.html", message=GENERIC_ERROR), 500

            if detail is None:
                return render_template("not_found.html", product_id=product_id), 404

            show_form = request.args.get("review") == "new"
            return render_template("product.html", detail=detail, show_form=show_form)

        @self.app.route("/products/<product_id>/reviews", methods=["POST"])
        def add_review(product_id):
            """Add-review form submission."""
            try:
                self.catalog.add_review(
                    product_id,
                    reviewer_name=request.form.get("reviewer_name", ""),
                    rating=request.form.get("rating", ""),
                    comment=request.form.get("comment", ""),
                )
            except ProductNotFoundError:
                return render_template("not_found.html", product_id=product_id), 404
            except ValueError as e:
                flash(str(e), "error")
                return redirect(url_for("product_detail", product_id=product_id, review="new"))

            return redirect(url_for("product_detail", product_id=product_id))

        @self.app.route("/api/products", methods=["GET"])
        def api_list_products():
            """API endpoint for the product list."""
            try:
                view = self.catalog.load_dashboard(self._platform_arg(), raise_errors=True)
            except StoreError as e:
                return jsonify({"error": str(e)}), 500
            return jsonify([product.to_dict() for product in view["products"]])

        @self.app.route("/api/products", methods=["POST"])
        def api_create_product():
            """API endpoint for creating a product."""
            try:
                data = self._json_body()
                product = self.catalog.create_product(
                    name=data.get("name", ""),
                    url=data.get("url", ""),
                    platform=data.get("platform", ""),
                    price=data.get("price"),
                    image_url=data.get("image_url"),
                )
            except ValueError as e:
                return jsonify({"error": str(e)}), 400
            except StoreError as e:
                logger.error(f"Error creating product: {e}")
                return jsonify({"error": str(e)}), 500

            return jsonify(product.to_dict()), 201

        @self.app.route("/api/products/<product_id>")
        def api_product_detail(product_id):
            """API endpoint for one product with its reviews."""
            try:
                detail = self.catalog.load_product(product_id)
            except StoreError as e:
                return jsonify({"error": str(e)}), 500

            if detail is None:
                return jsonify({"error": f"Product {product_id} not found"}), 404
            return jsonify(detail.to_dict())

        @self.app.route("/api/products/<product_id>/reviews", methods=["POST"])
        def api_add_review(product_id):
            """API endpoint for adding a review."""
            try:
                data = self._json_body()
                review = self.catalog.add_review(
                    product_id,
                    reviewer_name=data.get("reviewer_name", ""),
                    rating=data.get("rating"),
                    comment=data.get("comment", ""),
                )
            except ProductNotFoundError:
                return jsonify({"error": f"Product {product_id} not found"}), 404
            except ValueError as e:
                return jsonify({"error": str(e)}), 400

            if review is None:
                return jsonify({"error": GENERIC_ERROR}), 500
            return jsonify(review.to_dict()), 201

        @self.app.route("/api/stats")
        def api_stats():
            """API endpoint for dashboard statistics."""
            try:
                view = self.catalog.load_dashboard(self._platform_arg(), raise_errors=True)
            except StoreError as e:
                return jsonify({"error": str(e)}), 500

            return jsonify(
                {
                    "platform": view["platform"],
                    "stats": view["stats"],
                    "visible_stats": view["visible_stats"],
                }
            )

        @self.app.route("/api/health")
        def api_health():
            """Health check endpoint."""
            health_status = self.catalog.health_check()
            status_code = 200 if all(health_status.values()) else 503
            return jsonify(health_status), status_code

    def run(self, host: str = "0.0.0.0", port: int = 5000, debug: bool = False):
        """Run the Flask application."""
        logger.info(f"Starting review collector on {host}:{port}")
        self.app.run(host=host, port=port, debug=debug)


def create_app(
    config: Optional[Dict[str, Any]] = None, db_manager: Optional[DatabaseManager] = None
) -> Flask:
    """Factory function to create Flask app."""
    return ReviewCollectorApp(config, db_manager).app
