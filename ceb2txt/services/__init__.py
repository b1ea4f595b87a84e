from .recovery import RecoveryResult, TranscriptRecovery

__all__ = ["RecoveryResult", "TranscriptRecovery"]
