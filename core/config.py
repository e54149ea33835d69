import os
import logging
from dotenv import load_dotenv
from botocore.client import Config as BotoConfig
import boto3

# Load .env from project root
try:
    load_dotenv(dotenv_path=os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".env")))
except Exception:
    try:
        load_dotenv()
    except Exception:
        pass

# Environment
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID", "")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID", "")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY", "")
R2_BUCKET = os.getenv("R2_BUCKET", "")
R2_PUBLIC_BASE_URL = (os.getenv("R2_PUBLIC_BASE_URL", "") or "").strip().strip('"').strip("'").strip('`').rstrip("/")

MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "50"))

# Portfolio feed
FEED_PAGE_SIZE = int(os.getenv("FEED_PAGE_SIZE", "12"))
# Sentinel lookahead and visibility ratio used by the feed client's scroll trigger
SCROLL_ROOT_MARGIN_PX = float(os.getenv("SCROLL_ROOT_MARGIN_PX", "100"))
SCROLL_THRESHOLD = float(os.getenv("SCROLL_THRESHOLD", "0.1"))

# Admin panel tokens
ADMIN_JWT_SECRET = (os.getenv("ADMIN_JWT_SECRET", "") or os.getenv("SECRET_KEY", "")).strip()
ADMIN_JWT_ISSUER = os.getenv("ADMIN_JWT_ISSUER", "portfolio.admin")
ADMIN_JWT_TTL_HOURS = int(os.getenv("ADMIN_JWT_TTL_HOURS", "24"))

SITE_NAME = os.getenv("SITE_NAME", "Tasveeri Yaadein")

# ---- CORS ----
_default_origins = ",".join([
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
])
_origins_env = os.getenv("ALLOWED_ORIGINS") or os.getenv("CORS_ORIGINS") or os.getenv("FRONTEND_ORIGIN") or _default_origins
ALLOWED_ORIGINS = [o.strip() for o in _origins_env.split(",") if o.strip()]

# Logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger("portfolio")

# Static dir helper (local storage fallback when R2 is not configured)
STATIC_DIR = os.getenv("STATIC_DIR") or os.path.join(os.path.dirname(__file__), "..", "static")

# S3/R2 client for media uploads
s3 = None

if R2_ACCOUNT_ID and R2_ACCESS_KEY_ID and R2_SECRET_ACCESS_KEY:
    s3 = boto3.resource(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=BotoConfig(signature_version="s3v4"),
        region_name="auto",
    )
