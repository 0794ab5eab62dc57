from sfmanager.api.app import build_authenticator, create_app

__all__ = ["build_authenticator", "create_app"]
