"""
Flask extensions initialization.
"""
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# Database
db = SQLAlchemy()

# Migrations
migrate = Migrate()

# Cross-origin requests from the frontend
cors = CORS()
