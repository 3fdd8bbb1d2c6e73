"""Identity service: account registration, login, and token issuance."""
