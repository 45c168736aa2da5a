"""
App-wide FastAPI dependencies for process-level collaborators.

Objects built once in the lifespan live on app.state; these accessors hand
them to route handlers and give tests a single override point.
"""
from fastapi import Request

from app.config import Settings
from app.email.sender import EmailSender
from app.storage import Storage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_storage(request: Request) -> Storage:
    return request.app.state.storage
