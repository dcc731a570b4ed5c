from .s3 import S3Storage

__all__ = ["S3Storage"]
