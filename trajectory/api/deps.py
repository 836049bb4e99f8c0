from fastapi import Request

from trajectory.features.momentum.service import MomentumSession


def get_session(request: Request) -> MomentumSession:
    """The session built at startup and owned by the app."""
    return request.app.state.session
