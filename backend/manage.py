from studyflow import create_app, db
from studyflow import models  # noqa: F401  make sure the models are registered

# Create an app instance
app = create_app()

# The 'app_context' is needed for SQLAlchemy to know which app it's working with
with app.app_context():
    print("Creating all database tables...")
    db.create_all()
    print("Done!")
