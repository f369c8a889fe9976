"""SQLAlchemy async persistence (engine, models, repositories)."""
