import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Admin tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ADMIN_TOKEN_MINUTES = int(data.get("ADMIN_TOKEN_MINUTES", 60))
    ADMIN_PENDING_2FA_TOKEN_MINUTES = int(data.get("ADMIN_PENDING_2FA_TOKEN_MINUTES", 5))

    # Password hashing
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    PBKDF2_ITERATIONS = int(data.get("PBKDF2_ITERATIONS", 100000))
    MEMBER_PASSWORD_SALT = data.get("MEMBER_PASSWORD_SALT", "shadowmesh_salt")
    ADMIN_LEGACY_PASSWORD_SALT = data.get("ADMIN_LEGACY_PASSWORD_SALT", "shadowmesh_admin_salt")

    # TOTP
    TOTP_ISSUER = data.get("TOTP_ISSUER", "ShadowMesh")
    ADMIN_TOTP_ISSUER = data.get("ADMIN_TOTP_ISSUER", "ShadowMesh Admin")

    # E-mail
    PUBLIC_SITE_URL = data.get("PUBLIC_SITE_URL", "https://shadowmesh.org")
    RESEND_API_URL = data.get("RESEND_API_URL", "https://api.resend.com/emails")
    RESEND_API_KEY = data.get("RESEND_API_KEY", "")
    RESEND_FROM_EMAIL = data.get("RESEND_FROM_EMAIL", "noreply@shadowmesh.org")

    RATE_LIMIT_SWEEP_SECONDS = int(data.get("RATE_LIMIT_SWEEP_SECONDS", 300))
