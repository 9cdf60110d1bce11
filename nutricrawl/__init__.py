"""
Pet Food Nutrition Crawler

Modules:
    models      - Data models (ProductRecord, NutrientProfile, ProductRef)
    common      - Shared utilities (HTTP client, config loader, errors, CSV utils)
    extraction  - Identifier, nutrient and descriptive field extraction
    sources     - Source adapters (zooplus, fressnapf, openpetfoodfacts)
    validation  - Completeness predicate, record checks, crawl tracker
    crawl       - Orchestrator, rate limiter, deduplicator, crawl state
    export      - JSON/CSV record export
"""

__version__ = "1.0.0"
