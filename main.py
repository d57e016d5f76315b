#!/usr/bin/env python3
"""
Review Collector - Main Entry Point

Collect e-commerce product listings and customer reviews, and browse their
rating statistics through a small web application.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

# Add src directory to Python path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from review_collector import CatalogService, DatabaseManager, StoreError
from review_collector.utils.helpers import format_rating, format_review_date
from review_collector.web import ReviewCollectorApp

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "data/review_collector.db"


def setup_logging(config: Dict[str, Any], verbose: bool = False):
    """Configure root logging from the ``logging`` config section."""
    log_config = config.get("logging", {})
    log_file = Path(log_config.get("file", "logs/review_collector.log"))
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_config.get("level", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(log_file), logging.StreamHandler()],
    )

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def load_config(config_path: str = "config/config.json") -> Dict[str, Any]:
    """Load configuration from file."""
    config_file = Path(config_path)

    if config_file.exists():
        with open(config_file, "r") as f:
            return json.load(f)
    else:
        logger.warning(f"Config file {config_path} not found, using defaults")
        return {}


def run_server(
    config: Dict[str, Any], db_manager: DatabaseManager, host: str = "0.0.0.0", port: int = 5000
):
    """Run the web application."""
    logger.info("Starting Review Collector web app")

    web_app = ReviewCollectorApp(config, db_manager)
    web_app.run(host=host, port=port, debug=config.get("flask", {}).get("DEBUG", False))


def add_product(catalog: CatalogService, args: argparse.Namespace):
    """Create a product from command line arguments."""
    product = catalog.create_product(
        name=args.name,
        url=args.url,
        platform=args.platform,
        price=args.price,
        image_url=args.image_url,
    )
    print(f"Created product {product.id}: {product.name} ({product.platform})")


def add_review(catalog: CatalogService, args: argparse.Namespace):
    """Attach a review from command line arguments."""
    review = catalog.add_review(
        args.product_id,
        reviewer_name=args.reviewer,
        rating=args.rating,
        comment=args.comment,
    )
    if review is None:
        print("Error: review could not be saved, see the log for details.")
        sys.exit(1)

    print(f"Added review {review.id} ({review.rating} stars) to product {args.product_id}")


def show_product(catalog: CatalogService, product_id: str):
    """Show one product, refreshing its aggregate rating."""
    detail = catalog.load_product(product_id)
    if detail is None:
        print(f"Error: product {product_id} not found.")
        sys.exit(1)

    product = detail.product
    print(f"\n=== {product.name} ===")
    print(f"Platform: {product.platform}")
    print(f"URL: {product.url}")
    if product.price:
        print(f"Price: {product.price}")
    print(f"Average Rating: {format_rating(product.average_rating)}")
    print(f"Total Reviews: {product.total_reviews}")

    print("\nRating Distribution:")
    for bar in detail.histogram:
        print(f"  {bar.rating} stars: {'#' * int(bar.width / 5):<20} {bar.count}")

    if detail.reviews:
        print("\nReviews:")
        for review in detail.reviews:
            print(
                f"  [{review.rating}/5] {review.reviewer_name} "
                f"({format_review_date(review.review_date)}): {review.comment}"
            )


def show_stats(catalog: CatalogService, platform: str):
    """Show dashboard statistics."""
    view = catalog.load_dashboard(platform)
    stats = view["stats"]
    store_stats = catalog.get_statistics()

    print("\n=== Review Collector Statistics ===")
    print(f"Total Products: {stats['total']}")
    print(f"Average Rating: {format_rating(stats['avg_rating'])}")
    print(f"Total Reviews (cached on products): {stats['total_reviews']}")
    print(f"Total Reviews (stored): {store_stats['total_reviews']}")

    print("\nBy Platform:")
    for name, count in sorted(store_stats["by_platform"].items()):
        print(f"  {name}: {count}")

    print("\nBy Rating:")
    for rating, count in sorted(store_stats["by_rating"].items()):
        print(f"  {rating} stars: {count}")

    if platform != "all":
        visible = view["visible_stats"]
        print(f"\nFiltered to {platform}:")
        print(f"  Products: {visible['total']}")
        print(f"  Average Rating: {format_rating(visible['avg_rating'])}")
        print(f"  Reviews: {visible['total_reviews']}")
        for product in view["products"]:
            print(f"  - {product.id} {product.name} ({format_rating(product.average_rating)})")


def create_sample_config():
    """Create a sample configuration file."""
    sample_config = {
        "database": {"path": DEFAULT_DB_PATH},
        "flask": {"SECRET_KEY": "change-this-in-production", "DEBUG": False},
        "catalog": {"recompute_on_write": False},
        "logging": {"level": "INFO", "file": "logs/review_collector.log"},
    }

    config_dir = Path("config")
    config_dir.mkdir(exist_ok=True)

    config_file = config_dir / "config.json"
    with open(config_file, "w") as f:
        json.dump(sample_config, f, indent=2)

    print(f"Sample configuration created at {config_file}")
    print("Please edit this file with your own settings.")


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Review Collector",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the web app
  python3 main.py serve

  # Add a product
  python3 main.py add-product --platform shopee --name "iPhone 15" --url https://shopee.co.id/item

  # Add a review
  python3 main.py add-review PRODUCT_ID --reviewer Budi --rating 5 --comment "Mantap"

  # Show a product and refresh its rating
  python3 main.py show PRODUCT_ID

  # Show statistics
  python3 main.py stats --platform tokopedia

  # Create sample configuration
  python3 main.py init-config
        """,
    )

    parser.add_argument(
        "--config",
        default="config/config.json",
        help="Path to configuration file (default: config/config.json)",
    )

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start the web app")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=5000, help="Port to bind to")

    product_parser = subparsers.add_parser("add-product", help="Add a product listing")
    product_parser.add_argument(
        "--platform", required=True, choices=["shopee", "tokopedia", "bukalapak", "lazada"]
    )
    product_parser.add_argument("--name", required=True, help="Product name")
    product_parser.add_argument("--url", required=True, help="Product URL")
    product_parser.add_argument("--price", help="Display price, e.g. 'Rp 15.000.000'")
    product_parser.add_argument("--image-url", help="Product image URL")

    review_parser = subparsers.add_parser("add-review", help="Add a review to a product")
    review_parser.add_argument("product_id", help="Product ID")
    review_parser.add_argument("--reviewer", required=True, help="Reviewer name")
    review_parser.add_argument("--rating", type=int, required=True, choices=range(1, 6))
    review_parser.add_argument("--comment", required=True, help="Review text")

    show_parser = subparsers.add_parser("show", help="Show a product and refresh its rating")
    show_parser.add_argument("product_id", help="Product ID")

    stats_parser = subparsers.add_parser("stats", help="Show catalog statistics")
    stats_parser.add_argument(
        "--platform",
        default="all",
        choices=["all", "shopee", "tokopedia", "bukalapak", "lazada"],
    )

    export_parser = subparsers.add_parser("export", help="Export the catalog to JSON")
    export_parser.add_argument(
        "--output", default="exports/catalog_export.json", help="Output file"
    )

    subparsers.add_parser("init-config", help="Create sample configuration file")

    return parser


def main():
    """Main CLI interface."""
    parser = build_parser()
    args = parser.parse_args()

    # Load configuration
    config = load_config(args.config)
    setup_logging(config, args.verbose)

    if args.command == "init-config":
        create_sample_config()
        return

    if args.command is None:
        parser.print_help()
        return

    try:
        # One store handle for the whole process
        db_manager = DatabaseManager(config.get("database", {}).get("path", DEFAULT_DB_PATH))
        catalog = CatalogService(db_manager, config)

        if args.command == "serve":
            run_server(config, db_manager, args.host, args.port)

        elif args.command == "add-product":
            add_product(catalog, args)

        elif args.command == "add-review":
            add_review(catalog, args)

        elif args.command == "show":
            show_product(catalog, args.product_id)

        elif args.command == "stats":
            show_stats(catalog, args.platform)

        elif args.command == "export":
            count = catalog.export_catalog(args.output)
            print(f"Exported {count} products to {args.output}")

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except (ValueError, LookupError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    except StoreError as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
