"""Azure DevOps identities: names, repositories and remotes."""
