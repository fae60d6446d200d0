#!/usr/bin/env python3
"""
Partner Site Import

Imports products or brands from a partner listing page into the
storefront catalog and prints a per-item report.
Site is auto-detected from URL.

Usage:
    python3 import_from_url.py --url https://www.najeebpharmacy.com/products/ --max 50
    python3 import_from_url.py --url https://shaheenchemistrwp.com/ --generic
    python3 import_from_url.py --url https://partner.example.pk/brands --kind brands --delete-existing
    python3 import_from_url.py --url https://dwatson.pk/medicines.html --dry-run --verbose

Environment:
    STOREFRONT_API_URL     Storefront origin (unless --api-url or --dry-run)
    STOREFRONT_API_TOKEN   Optional bearer token
"""

import argparse
import json
import os
import sys

from dotenv import load_dotenv

from partner_import.catalog import CatalogStoreError, InMemoryCatalogStore, StorefrontAPIClient
from partner_import.common.log_config import setup_logging
from partner_import.extraction import FetchError
from partner_import.importer import FLOW_BRANDS, FLOW_FROM_URL, FLOW_PRODUCTS, CatalogImporter
from partner_import.models import ImportResult, InvalidImportRequest

STATUS_LABELS = {"success": "OK", "skipped": "SKIPPED", "error": "ERROR"}


def print_report(result: ImportResult, url: str) -> None:
    """Print the itemized import report."""
    print("\n" + "=" * 80)
    print("IMPORT REPORT")
    print("=" * 80)

    print(f"\nURL: {url}")
    if result.source:
        print(f"Source: {result.source}")

    print(f"\n  Imported: {result.imported}")
    print(f"  Skipped:  {result.skipped}")
    print(f"  Failed:   {result.failed}")

    if result.items:
        print("\n" + "-" * 80)
        print(f"{result.kind.upper()} ({len(result.items)} items)")
        print("-" * 80)
        for item in result.items:
            label = STATUS_LABELS[item.status.value]
            price = f"{item.price:,.2f}" if item.price else ""
            line = f"  [{label:7}] {item.name[:50]:50} {price:>12}"
            if item.error:
                line += f"  ({item.error})"
            print(line)

    if result.message:
        print(f"\n{result.message}")

    print("\n" + "=" * 80)


def main():
    parser = argparse.ArgumentParser(
        description="Import products or brands from a partner website"
    )
    parser.add_argument("--url", required=True, help="Listing or brands page URL")
    parser.add_argument(
        "--kind",
        choices=["products", "brands"],
        default="products",
        help="What to import (default: products)"
    )
    parser.add_argument(
        "--generic",
        action="store_true",
        help="Use the generic-site cascade instead of partner detection"
    )
    parser.add_argument("--max", type=int, help="Maximum records to import (1-200)")
    parser.add_argument(
        "--delete-existing",
        action="store_true",
        help="Delete all catalog brands before a brand import"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Import into an in-memory catalog instead of the storefront"
    )
    parser.add_argument("--api-url", help="Storefront origin (default: $STOREFRONT_API_URL)")
    parser.add_argument("--output-json", help="Also write the result JSON to this path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--quiet", "-q", action="store_true", help="Warnings only")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    load_dotenv()

    if args.dry_run:
        store = InMemoryCatalogStore()
    else:
        api_url = args.api_url or os.environ.get("STOREFRONT_API_URL")
        if not api_url:
            print("Error: --api-url or STOREFRONT_API_URL is required (or use --dry-run)")
            sys.exit(1)
        store = StorefrontAPIClient(api_url, token=os.environ.get("STOREFRONT_API_TOKEN"))

    payload = {"url": args.url, "deleteExisting": args.delete_existing}
    if args.max is not None:
        payload["maxProducts"] = args.max

    if args.kind == "brands":
        flow = FLOW_BRANDS
    elif args.generic:
        flow = FLOW_PRODUCTS
    else:
        flow = FLOW_FROM_URL

    try:
        importer = CatalogImporter(store)
        request = importer.build_request(payload, flow)

        if flow == FLOW_BRANDS:
            result = importer.import_brands(request)
        elif flow == FLOW_PRODUCTS:
            result = importer.import_products(request)
        else:
            result = importer.import_from_url(request)
    except InvalidImportRequest as e:
        print(f"\nError: {e}")
        sys.exit(1)
    except (FetchError, CatalogStoreError) as e:
        print(f"\nImport failed: {e}")
        sys.exit(1)
    finally:
        if isinstance(store, StorefrontAPIClient):
            store.close()

    print_report(result, args.url)

    if args.output_json:
        directory = os.path.dirname(args.output_json)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(args.output_json, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        print(f"\nResults saved to: {args.output_json}")

    sys.exit(0 if result.success else 1)


if __name__ == "__main__":
    main()
