"""Dashboard module - per-role summaries of attendance and tasks."""
