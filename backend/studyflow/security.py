# Encryption for vault secrets, account password hashing

import base64
import binascii
import logging

import bcrypt
from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2
from Crypto.Random import get_random_bytes

from .errors import DecodeError

logger = logging.getLogger(__name__)

# --- Symmetric Encryption (AES-GCM) ---

def _derive_key(passphrase: str, salt: bytes, iterations: int = 200_000) -> bytes:
    logger.debug(f'Deriving key with PBKDF2: iterations={iterations}, salt_len={len(salt)}')
    return PBKDF2(passphrase, salt, dkLen=32, count=iterations, hmac_hash_module=SHA256)

def encrypt_message(plaintext: bytes, passphrase: str, iterations: int = 200_000):
    """Encrypt plaintext using AES-GCM. Returns (ciphertext, nonce, tag, salt)."""
    salt = get_random_bytes(16)
    key = _derive_key(passphrase, salt, iterations)
    cipher = AES.new(key, AES.MODE_GCM)
    ciphertext, tag = cipher.encrypt_and_digest(plaintext)
    logger.debug(f'Encrypted message: plaintext_len={len(plaintext)}, ciphertext_len={len(ciphertext)}')
    return ciphertext, cipher.nonce, tag, salt

def decrypt_message(ciphertext: bytes, passphrase: str, nonce: bytes, tag: bytes, salt: bytes,
                    iterations: int = 200_000) -> bytes:
    key = _derive_key(passphrase, salt, iterations)
    cipher = AES.new(key, AES.MODE_GCM, nonce=nonce)
    plaintext = cipher.decrypt_and_verify(ciphertext, tag)
    logger.debug(f'Decrypted message: ciphertext_len={len(ciphertext)}')
    return plaintext


class SecretCodec:
    """Reversible, authenticated encoding of vault secrets for storage.

    ``encode`` output is ``v1:`` followed by the url-safe base64 of a frame::

        u32 len(salt) | u32 len(nonce) | u32 len(tag) | salt | nonce | tag | ciphertext

    Every call draws a fresh salt and nonce, so encoding the same secret twice
    yields different text. ``decode`` raises DecodeError for anything that was
    not produced by ``encode`` with the same passphrase.
    """

    PREFIX = 'v1:'
    _HEADER_LEN = 12

    def __init__(self, passphrase: str, iterations: int = 200_000):
        if not passphrase:
            raise ValueError('SecretCodec requires a non-empty passphrase')
        self._passphrase = passphrase
        self._iterations = iterations

    def encode(self, plaintext: str) -> str:
        ciphertext, nonce, tag, salt = encrypt_message(
            plaintext.encode('utf-8'), self._passphrase, self._iterations
        )
        def u32(n): return int(n).to_bytes(4, 'big')
        frame = b''.join([u32(len(salt)), u32(len(nonce)), u32(len(tag)), salt, nonce, tag, ciphertext])
        return self.PREFIX + base64.urlsafe_b64encode(frame).decode('ascii')

    def decode(self, cipher_text: str) -> str:
        if not isinstance(cipher_text, str) or not cipher_text.startswith(self.PREFIX):
            raise DecodeError('Unrecognised cipher text format')
        try:
            frame = base64.urlsafe_b64decode(cipher_text[len(self.PREFIX):].encode('ascii'))
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise DecodeError('Cipher text is not valid base64') from exc

        if len(frame) < self._HEADER_LEN:
            raise DecodeError('Cipher text frame is truncated')
        def read_u32(idx): return int.from_bytes(frame[idx:idx + 4], 'big')
        ls, ln, lt = read_u32(0), read_u32(4), read_u32(8)
        off = self._HEADER_LEN
        if ls == 0 or ln == 0 or lt == 0 or len(frame) - off < ls + ln + lt:
            raise DecodeError('Cipher text frame is truncated')
        salt = frame[off:off + ls]; off += ls
        nonce = frame[off:off + ln]; off += ln
        tag = frame[off:off + lt]; off += lt
        ciphertext = frame[off:]

        try:
            plaintext = decrypt_message(ciphertext, self._passphrase, nonce, tag, salt, self._iterations)
        except ValueError as exc:
            # MAC check failed, or a nonce/tag length AES-GCM refuses
            raise DecodeError('Cipher text failed authentication') from exc
        try:
            return plaintext.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise DecodeError('Decoded secret is not valid UTF-8') from exc


# --- Account password hashing (bcrypt) ---

# bcrypt refuses longer input
BCRYPT_MAX_BYTES = 72

def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('ascii')

def check_password(password: str, password_hash: str) -> bool:
    candidate = password.encode('utf-8')
    if len(candidate) > BCRYPT_MAX_BYTES:
        # no stored password can be this long
        logger.debug('Password candidate exceeds the bcrypt input limit')
        return False
    try:
        return bcrypt.checkpw(candidate, password_hash.encode('ascii'))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning('Password hash has an invalid format')
        return False
