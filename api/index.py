"""
Vercel entry point for the Organization Directory API
"""
import sys
import os

# Add parent directory to path
parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

# Set environment variables for serverless
os.environ.setdefault("ENVIRONMENT", "production")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from mangum import Mangum
from src.config import settings
from src.infrastructure.database import init_database
from src.main import app
from src.shared.infrastructure.logging import setup_logging

# Lifespan is disabled for serverless, so set up logging and the engine here
setup_logging(settings.log_level, settings.environment)
init_database()

handler = Mangum(app, lifespan="off")
