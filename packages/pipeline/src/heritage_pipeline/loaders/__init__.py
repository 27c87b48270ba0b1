"""heritage_pipeline.loaders — Supabase writers."""
