"""JIRA REST API access through httpx."""
