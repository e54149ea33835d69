from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import os

from core.config import logger, ALLOWED_ORIGINS, STATIC_DIR, SITE_NAME  # type: ignore

# Routers
from routers import portfolio, admin, admin_portfolio, website  # type: ignore

app = FastAPI(title=f"{SITE_NAME} Portfolio")

# ---- CORS setup ----
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Security headers ---
@app.middleware("http")
async def add_security_headers(request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
    response.headers.setdefault("X-Frame-Options", "DENY")
    if os.getenv("HSTS", "1").strip() == "1":
        response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains")
    return response

# ---- Static mount (local media fallback) ----
try:
    os.makedirs(STATIC_DIR, exist_ok=True)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
except OSError as _ex:
    logger.warning(f"static mount skipped: {_ex}")

# ---- Include routers ----
app.include_router(portfolio.router)
app.include_router(admin.router)
app.include_router(admin_portfolio.router)
app.include_router(website.router)


@app.on_event("startup")
async def _init_schema():
    try:
        from core.database import init_db
        init_db()
    except Exception as _ex:
        logger.warning(f"init_db failed: {_ex}")


@app.get("/")
async def root():
    return {"ok": True, "service": "portfolio"}
