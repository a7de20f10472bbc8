# ==============================================
# COMPONENT 1: CODEC
# ==============================================
#
# Detects which charset a SOSI byte buffer uses and converts
# between bytes and text in both directions. The same decision
# is used to decode the input and to re-encode cleaned output,
# so the output keeps the input's byte convention.
#
# Modules:
# --------
# - codec.py  → Charset, EncodingDecision, detect/decode/encode
#
# ==============================================

from .codec import Charset, EncodingDecision, detect, decode, encode, decode_bytes

__all__ = ["Charset", "EncodingDecision", "detect", "decode", "encode", "decode_bytes"]
