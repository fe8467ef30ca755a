"""Tasks module - work logged by employees."""
