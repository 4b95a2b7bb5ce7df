# This file is intended to hold the setup for the authenticated httpx client used for JIRA.

"""Sets up the authenticated httpx client for the JIRA REST API."""

import httpx

from issue_sync.configuration.models import JiraAuthenticationType


def get_jira_client(
    jira_uri: str,
    jira_auth_type: JiraAuthenticationType,
    jira_user: str | None,
    jira_pass: str | None,
    jira_token: str | None,
    timeout: float,
) -> httpx.AsyncClient:
    """Returns an httpx client authenticated against a JIRA instance.

    Basic authentication uses the username and password (or API token); token
    authentication sends a bearer personal access token. The timeout applies to
    every call made through the client.
    """
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    auth: httpx.BasicAuth | None = None
    if jira_auth_type == JiraAuthenticationType.BASIC:
        if not (jira_user and jira_pass):
            raise RuntimeError("JIRA basic authentication requires jira_user and jira_pass in config.")
        auth = httpx.BasicAuth(jira_user, jira_pass)
    elif jira_auth_type == JiraAuthenticationType.TOKEN:
        if not jira_token:
            raise RuntimeError("JIRA token authentication requires jira_token in config.")
        headers["Authorization"] = f"Bearer {jira_token}"
    return httpx.AsyncClient(
        base_url=jira_uri.rstrip("/") + "/",
        auth=auth,
        headers=headers,
        timeout=timeout,
    )
