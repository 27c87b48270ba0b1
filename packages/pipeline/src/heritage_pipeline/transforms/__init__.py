"""heritage_pipeline.transforms — record normalization."""
