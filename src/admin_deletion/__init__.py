"""Admin account deletion service: lookup, cascading soft delete, audit trail."""
