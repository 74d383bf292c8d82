from .logging import StructuredFormatter, configure_root_logger, hash_user_id

__all__ = ["StructuredFormatter", "configure_root_logger", "hash_user_id"]
