"""GitHub API access through githubkit."""
