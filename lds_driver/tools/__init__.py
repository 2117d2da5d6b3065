from .utilities import log_exceptions, hexdump

__all__ = ["log_exceptions", "hexdump"]
