"""Local persistence for plate-loader."""
