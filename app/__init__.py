"""Brokerage core service: access control, role management and payment references."""
