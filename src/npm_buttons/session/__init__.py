from npm_buttons.session.manager import NpmButtonsSession

__all__ = [
    "NpmButtonsSession",
]
