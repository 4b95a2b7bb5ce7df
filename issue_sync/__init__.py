"""Synchronize GitHub issues into JIRA."""
