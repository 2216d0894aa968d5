"""
Project Dispatch Desk
SQLAlchemy extension instance shared by all models.

Models:
    - project: Project, LogEntry, Attachment
    - user: User
    - prompt: PromptTemplate
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
