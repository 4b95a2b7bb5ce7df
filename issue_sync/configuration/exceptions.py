"""Contains exceptions raised when reconciling application configuration."""


class ConfigurationError(Exception):
    """Base class for errors that prevent a synchronization run from starting."""

    pass


class GitHubAuthenticationConfigurationUndefinedError(ConfigurationError):
    """Raised when the GitHub authentication configuration is undefined."""

    pass


class JiraAuthenticationConfigurationUndefinedError(ConfigurationError):
    """Raised when the JIRA authentication configuration is undefined or ambiguous."""

    pass


class RequiredConfigurationElementError(ConfigurationError):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, cli_name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(f"Missing required configuration element: {name} (command line option {cli_name}, environment variable {env_name})")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name


class InvalidConfigurationValueError(ConfigurationError):
    """Raised when a configuration element is present but malformed."""

    pass


class MissingCustomFieldError(ConfigurationError):
    """Raised when JIRA custom fields required for synchronization cannot be found."""

    def __init__(self, field_names: list[str]) -> None:
        """Initializes the exception with the display names of the missing fields."""
        quoted = ", ".join(f"'{name}'" for name in field_names)
        super().__init__(f"Could not find ID of custom field(s) {quoted}; check that they are named correctly")
        self.field_names = field_names
