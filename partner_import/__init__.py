"""
Partner Site Catalog Importer

Modules:
    models      - Data models (candidates, catalog records, import results)
    common      - Shared utilities (config loader, logging, slugs)
    extraction  - Site detection, fetching, DOM extraction, price/category/dedup rules
    catalog     - Catalog store contract and implementations
    importer    - Import flows and result reporting
    api         - FastAPI endpoints for the admin back-office
"""
