"""SAS URI building: domains and workflows."""
