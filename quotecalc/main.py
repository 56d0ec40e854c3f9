from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from .config import settings
from .database import engine, Base
from .routers import auth, cart, catalog, exports, users

logger = logging.getLogger("quotecalc")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)


def _run_migrations():
    """Run pending Alembic migrations on startup.

    Databases created by Base.metadata.create_all() before Alembic was run
    get the initial revision stamped first.
    """
    try:
        from alembic.config import Config
        from alembic import command
        from sqlalchemy import inspect

        alembic_ini = os.path.join(os.path.dirname(__file__), "..", "alembic.ini")
        if not os.path.exists(alembic_ini):
            logger.info("alembic.ini not found, skipping migrations")
            return

        alembic_cfg = Config(alembic_ini)
        alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

        insp = inspect(engine)
        has_alembic = "alembic_version" in insp.get_table_names()
        has_products = "products" in insp.get_table_names()

        if not has_alembic and has_products:
            logger.info("Stamping initial migration 3f2a9c4e8b10 (tables already exist)")
            command.stamp(alembic_cfg, "3f2a9c4e8b10")

        logger.info("Running pending Alembic migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete")

    except Exception as e:
        # Never let migration errors prevent app startup
        logger.warning(f"Alembic migration warning: {e}")


app = FastAPI(
    title="Product Calculator",
    description="Quotes for custom-dimensioned products: priced lines, cart, exports and PDFs",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(catalog.router, prefix="/api")
app.include_router(cart.router, prefix="/api")
app.include_router(exports.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "quotecalc"}


@app.on_event("startup")
def auto_migrate():
    """Run pending Alembic migrations on startup."""
    _run_migrations()


@app.on_event("startup")
def auto_seed():
    """Create the first admin account when no users exist."""
    from .database import SessionLocal
    from .auth import hash_password
    from . import models

    if not settings.ADMIN_PASSWORD:
        return

    db = SessionLocal()
    try:
        if db.query(models.User).count() == 0:
            db.add(models.User(
                username=settings.ADMIN_USERNAME,
                password_hash=hash_password(settings.ADMIN_PASSWORD),
                is_admin=True,
            ))
            db.commit()
            logger.info("Seeded admin user '%s'", settings.ADMIN_USERNAME)
    finally:
        db.close()
