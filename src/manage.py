"""VC Reviews management CLI.

Usage:
    python src/manage.py setup-db                       # Create all tables
    python src/manage.py drop-db                        # Drop all tables
    python src/manage.py recompute-ratings              # Rebuild every firm's aggregate
    python src/manage.py recompute-ratings --firm acme-ventures
"""

import argparse
import sys


def setup_database():
    from vcreviews.domain import vcreviews
    from vcreviews.utils.db import setup_db

    print("Initializing vcreviews domain...")
    vcreviews.init()
    print("Creating database schema...")
    setup_db(vcreviews)
    print("Done.")


def drop_database():
    from vcreviews.domain import vcreviews
    from vcreviews.utils.db import drop_db

    print("Initializing vcreviews domain...")
    vcreviews.init()
    print("Dropping database schema...")
    drop_db(vcreviews)
    print("Done.")


def recompute_ratings(firm_slugs=None):
    """Rebuild rating aggregates from the stored reviews."""
    from vcreviews.domain import vcreviews
    from vcreviews.firm.directory import get_firm_by_slug
    from vcreviews.firm.rating import recompute_all_firm_ratings, recompute_firm_rating

    vcreviews.init()
    with vcreviews.domain_context():
        if not firm_slugs:
            count = recompute_all_firm_ratings()
            print(f"Recomputed {count} firm(s).")
            return

        for slug in firm_slugs:
            firm = recompute_firm_rating(get_firm_by_slug(slug).id)
            print(f"  {firm.slug}: {firm.avg_rating} over {firm.total_reviews} review(s)")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="VC Reviews management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    recompute_parser = subparsers.add_parser("recompute-ratings", help="Rebuild firm rating aggregates")
    recompute_parser.add_argument(
        "--firm",
        nargs="*",
        help="Slug(s) of the firm(s) to rebuild (default: all)",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "recompute-ratings":
        recompute_ratings(args.firm)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
