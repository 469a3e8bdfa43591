"""Constants for MLS key material."""

# Key sizes
X25519_PRIVATE_KEY_SIZE = 32
X25519_PUBLIC_KEY_SIZE = 32
ED25519_PRIVATE_KEY_SIZE = 32  # Seed form
ED25519_SECRET_KEY_SIZE = 64  # Seed || public key
ED25519_PUBLIC_KEY_SIZE = 32
ED25519_SIGNATURE_SIZE = 64
