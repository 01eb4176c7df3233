"""Domain services: accounts, tag normalization, share ids."""
