"""Command modules for swiftdeploy."""
