"""Output layer: result envelope and Rich/JSON rendering for the CLI."""
