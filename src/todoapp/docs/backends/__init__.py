"""
OpenAPI Document Backends

Each backend generates the API document with a different generator and
enriches it through the shared :class:`~todoapp.docs.enrichment.ExampleEnricher`.
"""
