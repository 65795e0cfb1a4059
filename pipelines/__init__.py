"""Call sites of the identity engine: create, CSV import, enrichment, lookup."""
