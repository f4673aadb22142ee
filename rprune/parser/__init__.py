from .parser import parse_rlang

__all__ = ["parse_rlang"]
