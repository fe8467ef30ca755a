"""Sub-roles module - permission catalogue and fine-grained grants."""
