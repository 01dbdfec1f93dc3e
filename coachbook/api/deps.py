from fastapi import Request

from coachbook.core.store import AirtableStore


def get_store(request: Request) -> AirtableStore:
    """The process-wide record store created in the app lifespan."""
    return request.app.state.store
