import importlib
import logging
from pathlib import Path
from config.database import engine, SessionLocal, Base
from services.resource.registry import registry

logger = logging.getLogger(__name__)

API_DIR = Path(__file__).parent.parent / "api"

# Dictionary of loaded models, keyed by table name
models = {}


def module_name_for(path: Path) -> str:
    """``api/products/products_resource.py`` -> ``api.products.products_resource``"""
    relative = path.relative_to(API_DIR.parent).with_suffix("")
    return ".".join(relative.parts)


# Import every `*_resource.py` so models and descriptors register themselves
def scan_resources(directory: Path):
    for item in sorted(directory.rglob("*_resource.py")):
        importlib.import_module(module_name_for(item))

    for resource in registry:
        models[resource.model.__tablename__] = resource.model


scan_resources(API_DIR)


# Create tables in the database
def init_db():
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready: %s", ", ".join(sorted(models)))


# Exporting components
__all__ = ["engine", "SessionLocal", "Base", "models", "init_db", "registry"]
