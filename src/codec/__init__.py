"""Ledger line codec package."""

from src.codec.text_codec import TextCodec

__all__ = ["TextCodec"]
