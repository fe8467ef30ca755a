"""Companies module - tenants and their daily reports."""
