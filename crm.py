"""Contact store command line.

Every command runs one call site of the identity engine and prints its
result as JSON.

Usage:
  # Create (or merge into) a contact
  python crm.py create --first-name Jane --last-name Doe --company Acme \
      --linkedin-url linkedin.com/in/janedoe --email jane@acme.com --verified

  # Import an Apollo CSV export, cleaning titles/companies with the LLM
  python crm.py import-csv exports/apollo.csv --clean

  # Reveal an email through Apollo and save it
  python crm.py enrich --linkedin-url https://www.linkedin.com/in/janedoe

  # Look up a stored email by profile URL
  python crm.py lookup --linkedin-url linkedin.com/in/JaneDoe
"""
import argparse
import asyncio
import json
import logging
import os
import sys

from pydantic import BaseModel

from db.connection import dispose_engine
from identity.errors import ContactError
from pipelines.create_contact import create_contact
from pipelines.csv_import import import_csv
from pipelines.linkedin_lookup import lookup_email_by_linkedin
from pipelines.vendor_enrichment import enrich_contact

logger = logging.getLogger(__name__)


async def _run(args: argparse.Namespace) -> BaseModel:
    try:
        if args.command == "create":
            return await create_contact({
                "first_name": args.first_name,
                "last_name": args.last_name,
                "job_title": args.title,
                "company": args.company,
                "city": args.city,
                "state": args.state,
                "country": args.country,
                "linkedin_url": args.linkedin_url,
                "emails": args.email,
                "is_verified": args.verified,
            })
        if args.command == "import-csv":
            return await import_csv(args.path, clean=args.clean)
        if args.command == "enrich":
            return await enrich_contact(
                first_name=args.first_name,
                last_name=args.last_name,
                company=args.company,
                linkedin_url=args.linkedin_url,
            )
        return await lookup_email_by_linkedin(
            args.linkedin_url,
            first_name=args.first_name,
            last_name=args.last_name,
            company=args.company,
        )
    finally:
        await dispose_engine()


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Contact identity store")
    sub = parser.add_subparsers(dest="command")

    create = sub.add_parser("create", help="Create or merge a contact")
    create.add_argument("--first-name", required=True)
    create.add_argument("--last-name", required=True)
    create.add_argument("--title", default=None, help="Job title")
    create.add_argument("--company", default=None)
    create.add_argument("--city", default=None)
    create.add_argument("--state", default=None)
    create.add_argument("--country", default=None)
    create.add_argument("--linkedin-url", default=None)
    create.add_argument("--email", action="append", default=[], help="Repeat for several emails")
    create.add_argument("--verified", action="store_true", help="Mark contact and emails verified")

    imp = sub.add_parser("import-csv", help="Import an Apollo CSV export")
    imp.add_argument("path", help="Path to the CSV file")
    imp.add_argument(
        "--clean",
        action="store_true",
        help="Clean job titles and company names with the configured LLM",
    )

    enrich = sub.add_parser("enrich", help="Find an email through Apollo and save it")
    enrich.add_argument("--first-name", default=None)
    enrich.add_argument("--last-name", default=None)
    enrich.add_argument("--company", default=None)
    enrich.add_argument("--linkedin-url", default=None)

    lookup = sub.add_parser("lookup", help="Look up a stored email by LinkedIn URL")
    lookup.add_argument("--linkedin-url", required=True)
    lookup.add_argument("--first-name", default=None, help="Name fallback when the URL is unknown")
    lookup.add_argument("--last-name", default=None)
    lookup.add_argument("--company", default=None)

    return parser


if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    parser = _build_arg_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        result = asyncio.run(_run(args))
    except ContactError as exc:
        logger.error("%s failed: %s", args.command, exc)
        sys.exit(2)
    print(json.dumps(result.model_dump(mode="json"), indent=2))
