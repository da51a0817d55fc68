from .verifier import Verifier, VerificationReport, SIGNATURE_ABSENT, SIGNATURE_UNVERIFIED
from .batch_verifier import BatchVerifier

__all__ = [
    "Verifier",
    "VerificationReport",
    "BatchVerifier",
    "SIGNATURE_ABSENT",
    "SIGNATURE_UNVERIFIED",
]
