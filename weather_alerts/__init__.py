"""Weather hazard monitoring and safety alerts for outdoor job sites."""
