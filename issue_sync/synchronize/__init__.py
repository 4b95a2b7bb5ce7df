"""Reconciliation of GitHub issues into JIRA."""
