"""heritage_pipeline.enrichment — optional, rate-limited enrichment steps."""
