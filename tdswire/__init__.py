"""Encoders and decoders for the messages and tokens of the TDS wire protocol."""

__version__ = "0.1.0"