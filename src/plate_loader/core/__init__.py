"""Domain model and logic for plate-loader."""
