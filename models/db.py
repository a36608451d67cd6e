from flask_sqlalchemy import SQLAlchemy

# One engine/connection pool per process, bound to the app in create_app()
db = SQLAlchemy()
