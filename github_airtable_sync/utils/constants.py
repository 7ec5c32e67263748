"""Shared constants used across the application."""

# This file is intended to hold shared constants.

# GitHub Constants
# ----------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"
"""Default GitHub API URL. Override for GitHub Enterprise Server."""

GITHUB_ISSUES_PER_PAGE = 100
"""Maximum page size accepted by the GitHub issue listing endpoint."""

VALID_ISSUE_STATES = ("open", "closed", "all")
"""Issue lifecycle states accepted by the GitHub issue listing endpoint."""

# Airtable Constants
# ------------------

DEFAULT_AIRTABLE_API_URL = "https://api.airtable.com/v0"
"""Default Airtable REST API URL."""

AIRTABLE_MAX_RECORDS_PER_REQUEST = 10
"""Airtable rejects create/update calls carrying more than 10 records."""

AIRTABLE_RECORDS_PER_PAGE = 100
"""Maximum page size accepted by the Airtable record listing endpoint."""

AIRTABLE_REQUEST_TIMEOUT = 30.0
"""Per-request timeout in seconds for Airtable API calls."""

# Synchronization Constants
# -------------------------

DEFAULT_SYNC_TIMEOUT = 300.0
"""Default deadline in seconds for a complete synchronization run."""

LABEL_SEPARATOR = ","
"""Separator used when flattening issue labels into a single Airtable field."""
