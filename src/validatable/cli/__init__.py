"""validatable command line interface."""
