"""ETL package for synchronizing the MUBI film catalog.

Subpackages:
    extractors: Upstream HTTP client, normalizer and paginating extractor.
    aggregation: Film schema, merge policy and multi-country aggregator.
    sync: Differ and sync coordinator.
    loaders: Snapshot persistence (JSON file, SQL database).
    pipeline: Command line entry point.
"""
