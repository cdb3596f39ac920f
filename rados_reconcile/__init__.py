"""Reconcile bucket listings between two S3-compatible storage backends."""
