from .config import DynamoDBConfig, configure_logging

__all__ = [
    "DynamoDBConfig",
    "configure_logging",
]
