"""Provider services for the S3 inventory."""
