"""
tests.unit
==========

Unit tests for the core building blocks (token ids, transcripts, codecs,
config, logging, errors).
"""
