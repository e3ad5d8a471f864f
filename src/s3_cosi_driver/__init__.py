"""S3 COSI driver: buckets and bucket access grants on S3-compatible storage."""

__version__ = "0.1.0"
