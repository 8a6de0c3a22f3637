"""idokep_reader.core — Foundation layer.

Contains the byte cursor, the PNG decoder, border trimming, shared types,
configuration loading, and the report formatter.
This module has NO dependencies on idokep_reader.glyphs or idokep_reader.recognition.
Only stdlib, numpy, and PIL are allowed here.
"""
