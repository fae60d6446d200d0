"""HTTP entry points for the importer."""
