"""
Billing package - links organizations to subscriptions in the payments sidecar.

Covers checkout reconciliation at organization creation, the per-organization
billing record, seat counting and seat sync, and the customer portal.
"""
