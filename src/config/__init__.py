"""Runtime configuration loaded from the Lambda environment."""
