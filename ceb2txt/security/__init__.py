from .encryption import decrypt_payload, derive_key, encrypt_payload

__all__ = ["decrypt_payload", "derive_key", "encrypt_payload"]
