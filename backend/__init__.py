"""Backend of the task manager: REST API over SQLAlchemy."""
