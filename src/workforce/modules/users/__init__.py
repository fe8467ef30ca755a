"""Users module - company staff and administrators."""
