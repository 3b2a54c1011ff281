from prestospec.utils import logging

__all__ = ("logging",)
