"""Services wrapping git and the Azure DevOps REST API."""
