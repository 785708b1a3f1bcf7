from chatline.presentation.realtime.session_gateway import SessionGateway, SessionState

__all__ = ["SessionGateway", "SessionState"]
