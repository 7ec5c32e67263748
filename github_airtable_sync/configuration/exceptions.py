"""Contains exceptions raised when reconciling application configuration."""


class ConfigurationError(ValueError):
    """Base class for configuration problems detected before any network activity."""

    pass


class GitHubAuthenticationConfigurationUndefinedError(ConfigurationError):
    """Raised when the GitHub authentication configuration is undefined."""

    pass


class InvalidIssueStateError(ConfigurationError):
    """Raised when the issue state filter is not one of open, closed, or all."""

    pass


class InvalidRepositoryError(ConfigurationError):
    """Raised when the repository is not in owner/repo format."""

    pass


class RequiredConfigurationElementError(ConfigurationError):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, cli_name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(f"Missing required configuration element: {name}")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name


class ConfigurationErrors(ConfigurationError):
    """Raised when one or more configuration problems were found; carries all of them."""

    def __init__(self, errors: list[ConfigurationError]) -> None:
        """Initializes the exception with every configuration problem found."""
        super().__init__("; ".join(str(error) for error in errors))
        self.errors = errors
